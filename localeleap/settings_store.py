"""
Settings Store - user preferences read by the redirect engine.

Persists two keys in a YAML file:
    preferredLocale: fr
    ignoredDomains:
      - example.com

Usage:
    store = SettingsStore(get_settings().settings_file)
    store.set_preferred_locale(" fr ")
    store.ignore_domain("https://shop.example.com/cart")
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from localeleap.core.exceptions import SettingsError
from localeleap.core.url_utils import host_of

logger = logging.getLogger(__name__)

PREFERRED_LOCALE_KEY = "preferredLocale"
IGNORED_DOMAINS_KEY = "ignoredDomains"


class SettingsStore:
    """YAML-file backed settings with atomic writes."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"[SettingsStore] Failed to parse {self.path}: {e}. Using empty settings.")
            return {}
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"[SettingsStore] Failed to read {self.path}: {e}. Using empty settings.")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"[SettingsStore] Unexpected content in {self.path}, using empty settings")
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: temp file, then rename
        temp_file = self.path.with_suffix(".tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
        temp_file.replace(self.path)

    def get_preferred_locale(self) -> Optional[str]:
        locale = self._load().get(PREFERRED_LOCALE_KEY)
        if not isinstance(locale, str) or not locale.strip():
            return None
        return locale.strip()

    def get_ignored_domains(self) -> List[str]:
        domains = self._load().get(IGNORED_DOMAINS_KEY) or []
        if not isinstance(domains, list):
            logger.warning(f"[SettingsStore] {IGNORED_DOMAINS_KEY} is not a list, ignoring it")
            return []
        return [str(domain) for domain in domains]

    def set_preferred_locale(self, locale: str) -> str:
        """
        Save the preferred locale.

        Raises:
            SettingsError: if the trimmed locale is empty
        """
        value = (locale or "").strip()
        if not value:
            raise SettingsError("Preferred locale must not be empty")

        data = self._load()
        data[PREFERRED_LOCALE_KEY] = value
        self._save(data)
        logger.info(f"[SettingsStore] Preferred locale saved: {value}")
        return value

    def ignore_domain(self, url: str) -> str:
        """
        Add the host of a page URL to the ignore list.

        Returns:
            The domain that is now ignored

        Raises:
            InvalidUrl: if the URL has no host
        """
        domain = host_of(url)
        data = self._load()
        domains = data.get(IGNORED_DOMAINS_KEY)
        if not isinstance(domains, list):
            domains = []

        if domain not in domains:
            data[IGNORED_DOMAINS_KEY] = domains + [domain]
            self._save(data)
            logger.info(f"[SettingsStore] Ignored domain added: {domain}")
        return domain
