"""
Translator - resolves message keys to text in the caller's locale.

Catalogs are JSON files named <locale>.json in the locales directory.
The locale is always passed explicitly; nothing here depends on the
current request.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"

# Clients of the first version of the service send "il" for Hebrew
LOCALE_ALIASES = {"il": "he", "iw": "he"}


class Translator:
    """
    Looks up message keys in per-locale catalogs.

    Fallback order: requested locale, default locale, the key itself.
    """

    def __init__(self, catalogs: dict[str, dict[str, str]], default_locale: str = "en") -> None:
        if default_locale not in catalogs:
            raise ValueError(f"Default locale {default_locale!r} has no catalog")
        self._catalogs = catalogs
        self.default_locale = default_locale

    @classmethod
    def from_directory(cls, directory: Path = LOCALES_DIR, default_locale: str = "en") -> "Translator":
        """Load every <locale>.json catalog found in the directory."""
        catalogs = {
            path.stem: json.loads(path.read_text(encoding="utf-8"))
            for path in sorted(directory.glob("*.json"))
        }
        logger.debug("Loaded locales: %s", ", ".join(catalogs))
        return cls(catalogs, default_locale)

    @property
    def locales(self) -> frozenset[str]:
        return frozenset(self._catalogs)

    def translate(self, key: str, locale: str) -> str:
        catalog = self._catalogs.get(locale, {})
        if key in catalog:
            return catalog[key]
        return self._catalogs[self.default_locale].get(key, key)

    def resolve_locale(self, accept_language: str | None) -> str:
        """
        Pick a supported locale from an Accept-Language style header.

        Languages are tried by descending q-weight (header order breaks
        ties); only the primary subtag is considered, so "he-IL" matches
        "he". Falls back to the default locale.
        """
        if not accept_language:
            return self.default_locale

        weighted: list[tuple[float, int, str]] = []
        for position, part in enumerate(accept_language.split(",")):
            language, _, params = part.strip().partition(";")
            quality = 1.0
            params = params.strip()
            if params.startswith("q="):
                try:
                    quality = float(params[2:])
                except ValueError:
                    quality = 0.0
            if language and quality > 0:
                weighted.append((-quality, position, language))

        for _, _, language in sorted(weighted):
            primary = language.split("-")[0].lower()
            primary = LOCALE_ALIASES.get(primary, primary)
            if primary in self._catalogs:
                return primary

        return self.default_locale
