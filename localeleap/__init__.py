"""LocaleLeap: redirect navigations to the user's preferred locale."""

__version__ = "0.1.0"
