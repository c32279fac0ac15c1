"""Shared configuration, logging, models and errors for LocaleLeap."""
