"""Normalisation of municipality identifiers used as rate table keys."""

from __future__ import annotations

import re
from typing import NewType

MunicipalityKey = NewType("MunicipalityKey", str)

_SCANDINAVIAN_FOLDS = str.maketrans({"ä": "a", "ö": "o", "å": "a"})
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def normalise_municipality_key(value: str) -> MunicipalityKey:
    """Return the lookup key for a municipality name or slug.

    The key is lower-cased, ``ä``/``ö``/``å`` are folded to ``a``/``o``/``a``
    and every remaining character outside ``[a-z0-9]`` is dropped, so
    ``"Hämeenlinna"``, ``"HÄMEENLINNA"`` and ``"hameen-linna"`` all resolve to
    ``"hameenlinna"``.
    """

    folded = value.lower().translate(_SCANDINAVIAN_FOLDS)
    return MunicipalityKey(_NON_ALPHANUMERIC.sub("", folded))


__all__ = ["MunicipalityKey", "normalise_municipality_key"]
