"""Sélection du meilleur document candidat pour un destinataire."""

from __future__ import annotations

from collections.abc import Sequence

from certimatch.config import MatchingOptions
from certimatch.matching.classifier import classify_scored
from certimatch.matching.schema import (
    MATCH_EXACT,
    MATCH_FUZZY,
    MATCH_NAME_CONTAINS,
    MATCH_PDF_CONTAINS,
    CandidateDocument,
    MatchResult,
)
from certimatch.matching.scorers import score
from certimatch.normalize import compact, normalize

# Départage à confiance égale : exact > containment (deux sens) > fuzzy.
TYPE_RANK = {
    MATCH_EXACT: 0,
    MATCH_PDF_CONTAINS: 1,
    MATCH_NAME_CONTAINS: 1,
    MATCH_FUZZY: 2,
}


def _filename(candidate: CandidateDocument | str) -> str:
    return candidate.filename if isinstance(candidate, CandidateDocument) else str(candidate)


def rank_candidates(
    name: str,
    candidates: Sequence[CandidateDocument | str],
    options: MatchingOptions | None = None,
) -> list[MatchResult]:
    """
    Évalue le nom face à tous les candidats et les trie du meilleur au moins bon.

    Tri : confiance décroissante, puis type de match, recouvrement de tokens
    le plus élevé, nom de fichier normalisé le plus court, position dans la
    liste. Les candidats dont le nom normalisé est vide sont écartés.

    Returns:
        Liste triée (vide si aucun candidat ou nom vide).
    """
    opts = options or MatchingOptions()
    if not candidates:
        return []
    norm_name = normalize(name, filler_tokens=opts.filler_tokens)
    if not norm_name:
        return []

    keyed: list[tuple[tuple[int, int, float, int, int], MatchResult]] = []
    for position, candidate in enumerate(candidates):
        filename = _filename(candidate)
        norm_file = normalize(filename, filler_tokens=opts.filler_tokens)
        if not norm_file:
            continue
        sc = score(norm_name, norm_file, min_containment_length=opts.min_containment_length)
        result = classify_scored(filename, sc)
        key = (
            -result.confidence,
            TYPE_RANK[result.match_type],
            -sc.token_overlap,
            len(compact(norm_file)),
            position,
        )
        keyed.append((key, result))

    keyed.sort(key=lambda item: item[0])
    return [result for _, result in keyed]


def rank(
    name: str,
    candidates: Sequence[CandidateDocument | str],
    options: MatchingOptions | None = None,
) -> MatchResult | None:
    """
    Retourne le meilleur document pour ce nom.

    Tous les candidats sont évalués (pas de sortie anticipée : la confiance
    n'est pas monotone dans l'ordre d'énumération).

    Args:
        name: Nom affiché du destinataire.
        candidates: Documents (ou simples noms de fichiers), dans l'ordre fourni.
        options: Paramètres de normalisation et seuil min_confidence.

    Returns:
        MatchResult, ou None si aucun candidat, nom vide, ou meilleur
        résultat sous min_confidence.
    """
    opts = options or MatchingOptions()
    ranked = rank_candidates(name, candidates, opts)
    if not ranked or ranked[0].confidence < opts.min_confidence:
        return None
    return ranked[0]
