"""Finnish and English label catalogues for the salary breakdown.

Catalogues live as JSON files in :mod:`finsalary.translations`, one per
locale, each holding a ``backend`` map (labels the API embeds in responses)
and a ``frontend`` map (form strings the static pages fetch). Finnish is the
base locale: any key missing from another catalogue is answered from it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Iterable, Mapping

BASE_LOCALE = "fi"
_TRANSLATIONS_PACKAGE = "finsalary.translations"


@dataclass(frozen=True)
class Catalogue:
    """Labels published for one locale."""

    locale: str
    backend: Mapping[str, str]
    frontend: Mapping[str, Any]

    def missing_keys(self, reference: Catalogue) -> set[str]:
        """Return keys ``reference`` defines that this catalogue lacks."""

        missing = {f"backend.{key}" for key in reference.backend if key not in self.backend}
        missing.update(
            f"frontend.{key}" for key in reference.frontend if key not in self.frontend
        )
        return missing


@dataclass(frozen=True)
class Translator:
    """Look up backend labels, answering from the base catalogue when needed."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)

    def labels(self, prefix: str, names: Iterable[str]) -> dict[str, str]:
        """Translate ``{prefix}.{name}`` for each name, keyed by name."""

        return {name: self(f"{prefix}.{name}") for name in names}


@cache
def available_locales() -> tuple[str, ...]:
    """Return the locales with a JSON catalogue, sorted."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    found = sorted(
        entry.name.removesuffix(".json")
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(found) or (BASE_LOCALE,)


@cache
def load_catalogue(locale: str) -> Catalogue:
    """Read the catalogue for ``locale``; a locale without a file is empty."""

    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return Catalogue(locale=locale, backend={}, frontend={})

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    frontend = payload.get("frontend") or {}
    if not isinstance(backend, dict) or not isinstance(frontend, dict):
        raise ValueError(f"Translation catalogue '{locale}' must contain mappings")

    return Catalogue(
        locale=locale,
        backend={key: str(value) for key, value in backend.items()},
        frontend=frontend,
    )


def normalise_locale(locale: str | None) -> str:
    """Map ``fi-FI``, ``EN`` or ``en_GB`` onto a published locale, else Finnish."""

    if not locale:
        return BASE_LOCALE

    language = locale.strip().lower().replace("_", "-").split("-")[0]
    return language if language in available_locales() else BASE_LOCALE


def negotiate_locale(accept_language: str | None) -> str | None:
    """Pick the first published locale from an ``Accept-Language`` header.

    Entries are tried in the order sent; quality weights are ignored. Returns
    ``None`` when the header names no published language.
    """

    if not accept_language:
        return None

    for entry in accept_language.split(","):
        language = entry.split(";")[0].strip().lower().replace("_", "-").split("-")[0]
        if language in available_locales():
            return language
    return None


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator for ``locale`` backed by the Finnish catalogue."""

    catalogue = load_catalogue(normalise_locale(locale))
    return Translator(
        locale=catalogue.locale,
        _messages=catalogue.backend,
        _fallback=load_catalogue(BASE_LOCALE).backend,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Return the requested catalogue plus the Finnish fallback for clients."""

    catalogue = load_catalogue(normalise_locale(locale))
    base = load_catalogue(BASE_LOCALE)

    return {
        "locale": catalogue.locale,
        "available_locales": list(available_locales()),
        "backend": dict(catalogue.backend),
        "frontend": catalogue.frontend,
        "fallback": {
            "locale": base.locale,
            "backend": dict(base.backend),
            "frontend": base.frontend,
        },
    }


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
