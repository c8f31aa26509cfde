"""Label catalogues for breakdown responses and the calculator pages."""

from .catalog import (
    BASE_LOCALE,
    Catalogue,
    Translator,
    available_locales,
    get_translator,
    load_catalogue,
    load_translations,
    negotiate_locale,
    normalise_locale,
)

__all__ = [
    "BASE_LOCALE",
    "Catalogue",
    "Translator",
    "available_locales",
    "get_translator",
    "load_catalogue",
    "load_translations",
    "negotiate_locale",
    "normalise_locale",
]
