"""Message catalogs and locale resolution."""

from .translator import LOCALE_ALIASES, Translator

__all__ = ["LOCALE_ALIASES", "Translator"]
