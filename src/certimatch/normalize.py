"""Normalisation des noms de destinataires et des noms de fichiers."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable
from typing import Any

from certimatch.config import DEFAULT_FILLER_TOKENS

_EXTENSION_RE = re.compile(r"\.(pdf|docx?|odt|png|jpe?g)$", re.IGNORECASE)
_SEPARATORS_RE = re.compile(r"[\W_]+")


def _is_missing(s: Any) -> bool:
    return s is None or (isinstance(s, float) and (s != s or s == float("inf")))


def _remove_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if unicodedata.category(c) != "Mn")


def normalize(
    raw: str | float | int | None,
    *,
    filler_tokens: Iterable[str] = DEFAULT_FILLER_TOKENS,
) -> str:
    """
    Met un nom ou un nom de fichier sous forme comparable.

    NFKC, accents retirés, minuscules, extension finale retirée, séparateurs
    (espaces, ponctuation, underscores) réduits à un espace, mots de
    remplissage ("certificate", "doc", ...) supprimés.

    Args:
        raw: Nom du destinataire ou nom de fichier.
        filler_tokens: Mots sans valeur d'identité à retirer.

    Returns:
        Tokens séparés par un espace, ou chaîne vide.
    """
    if _is_missing(raw):
        return ""
    text = unicodedata.normalize("NFKC", str(raw).strip())
    text = _remove_diacritics(text).lower()
    text = _EXTENSION_RE.sub("", text)
    text = _SEPARATORS_RE.sub(" ", text).strip()
    if not text:
        return ""
    fillers = frozenset(filler_tokens)
    return " ".join(t for t in text.split(" ") if t not in fillers)


def compact(normalized: str) -> str:
    """Forme sans séparateurs : "john doe" -> "johndoe"."""
    return normalized.replace(" ", "")


def tokens(normalized: str) -> frozenset[str]:
    """Ensemble des tokens d'une chaîne normalisée."""
    return frozenset(t for t in normalized.split(" ") if t)


def safe_str(val: Any) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if _is_missing(val):
        return ""
    return str(val)
