"""Gettext-backed translator used as the host's localization provider."""

from __future__ import annotations

import gettext
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class CatalogTranslator:
    """Translate strings through the catalogs loaded for each text domain.

    Catalogs are compiled ``.mo`` files named ``<domain>-<locale>.mo`` inside
    the directory passed to :meth:`load_textdomain`. Strings missing from
    every loaded catalog are returned unchanged.
    """

    def __init__(self, locale: str = "en_US", messages: dict[str, str] | None = None) -> None:
        self._locale = locale
        self._messages = dict(messages or {})
        self._catalogs: dict[str, gettext.NullTranslations] = {}

    def locale(self) -> str:
        return self._locale

    @property
    def domains(self) -> list[str]:
        return sorted(self._catalogs)

    def load_textdomain(self, domain: str, path: str, locale: str | None = None) -> bool:
        """Load ``<domain>-<locale>.mo`` from ``path``; ``locale`` defaults to :meth:`locale`."""
        mo_file = Path(path) / f"{domain}-{locale or self._locale}.mo"
        if not mo_file.is_file():
            logger.debug("No catalog for domain %s at %s", domain, mo_file)
            return False

        with mo_file.open("rb") as fp:
            self._catalogs[domain] = gettext.GNUTranslations(fp)
        logger.debug("Loaded catalog %s for domain %s", mo_file, domain)
        return True

    def translate(self, text: str) -> str:
        if text in self._messages:
            return self._messages[text]
        for catalog in self._catalogs.values():
            translated = catalog.gettext(text)
            if translated != text:
                return translated
        return text
