"""In-page hreflang scanning for LocaleLeap."""

from localeleap.scanner.page_scanner import PageScanner, extract_hints

__all__ = ["PageScanner", "extract_hints"]
