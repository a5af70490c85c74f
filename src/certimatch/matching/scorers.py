"""Calcul des signaux de similarité entre deux chaînes normalisées."""

from __future__ import annotations

from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from certimatch.config import DEFAULT_MIN_CONTAINMENT_LENGTH
from certimatch.normalize import compact, tokens

CONTAINMENT_NONE = "none"
CONTAINMENT_A_CONTAINS_B = "a_contains_b"
CONTAINMENT_B_CONTAINS_A = "b_contains_a"


@dataclass(frozen=True)
class SimilarityScore:
    """Signaux indépendants ; le classifieur choisit parmi eux."""

    similarity: float  # 1 - distance / max(len), sur les formes compactes
    containment: str = CONTAINMENT_NONE
    exact: bool = False
    token_overlap: float = 0.0
    length_ratio: float = 0.0  # containment : longueur contenue / longueur contenante


def edit_similarity(a: str, b: str) -> float:
    """
    Similarité Levenshtein normalisée (0-1).

    Deux chaînes vides sont identiques (1.0).
    """
    if not a and not b:
        return 1.0
    return float(Levenshtein.normalized_similarity(a, b))


def token_overlap(a: str, b: str) -> float:
    """Tokens communs / tokens distincts (Jaccard). 0 si l'une est vide."""
    ta, tb = tokens(a), tokens(b)
    if not ta or not tb:
        return 0.0
    return len(ta & tb) / len(ta | tb)


def score(
    a: str,
    b: str,
    *,
    min_containment_length: int = DEFAULT_MIN_CONTAINMENT_LENGTH,
) -> SimilarityScore:
    """
    Compare deux chaînes déjà normalisées.

    Égalité, containment et distance d'édition portent sur les formes
    compactes (sans séparateurs), de sorte que "john doe" et "johndoe" sont
    égaux. Le recouvrement de tokens utilise les formes avec espaces.

    Args:
        a: Nom normalisé (côté destinataire).
        b: Nom de fichier normalisé (côté document).
        min_containment_length: Longueur minimale de la chaîne contenue pour
            qu'un containment soit retenu ; en dessous, seul le fuzzy compte.

    Returns:
        SimilarityScore.
    """
    ca, cb = compact(a), compact(b)
    overlap = token_overlap(a, b)
    if not ca or not cb:
        return SimilarityScore(similarity=0.0, token_overlap=overlap)

    similarity = edit_similarity(ca, cb)
    if ca == cb:
        return SimilarityScore(similarity=1.0, exact=True, token_overlap=overlap)

    containment = CONTAINMENT_NONE
    ratio = 0.0
    if len(cb) >= min_containment_length and cb in ca:
        containment = CONTAINMENT_A_CONTAINS_B
        ratio = len(cb) / len(ca)
    elif len(ca) >= min_containment_length and ca in cb:
        containment = CONTAINMENT_B_CONTAINS_A
        ratio = len(ca) / len(cb)

    return SimilarityScore(
        similarity=similarity,
        containment=containment,
        token_overlap=overlap,
        length_ratio=ratio,
    )
