"""Classification d'une paire (nom, fichier) : type de match et confiance."""

from __future__ import annotations

from certimatch.config import MatchingOptions
from certimatch.matching.schema import (
    MATCH_EXACT,
    MATCH_FUZZY,
    MATCH_NAME_CONTAINS,
    MATCH_PDF_CONTAINS,
    MEDIUM_CONFIDENCE,
    MatchResult,
    needs_review,
)
from certimatch.matching.scorers import (
    CONTAINMENT_A_CONTAINS_B,
    CONTAINMENT_B_CONTAINS_A,
    SimilarityScore,
    score,
)
from certimatch.normalize import normalize

# Plage linéaire du containment : jamais sous Medium, jamais au niveau d'un exact.
CONTAINMENT_FLOOR = MEDIUM_CONFIDENCE
CONTAINMENT_CEILING = 95
FUZZY_CEILING = 99


def containment_confidence(length_ratio: float) -> int:
    """70 + 25 * ratio des longueurs, arrondi."""
    span = CONTAINMENT_CEILING - CONTAINMENT_FLOOR
    return min(CONTAINMENT_CEILING, CONTAINMENT_FLOOR + int(round(span * length_ratio)))


def fuzzy_confidence(similarity: float) -> int:
    """Similarité Levenshtein en pourcentage, plafonnée sous l'exact."""
    return max(0, min(FUZZY_CEILING, int(round(similarity * 100))))


def classify_scored(filename: str, sc: SimilarityScore) -> MatchResult:
    """Construit le MatchResult à partir des signaux déjà calculés."""
    if sc.exact:
        return MatchResult(
            filename=filename,
            confidence=100,
            match_type=MATCH_EXACT,
            needs_review=False,
            similarity=1.0,
        )

    if sc.containment == CONTAINMENT_B_CONTAINS_A:
        match_type = MATCH_PDF_CONTAINS
        confidence = containment_confidence(sc.length_ratio)
    elif sc.containment == CONTAINMENT_A_CONTAINS_B:
        match_type = MATCH_NAME_CONTAINS
        confidence = containment_confidence(sc.length_ratio)
    else:
        match_type = MATCH_FUZZY
        confidence = fuzzy_confidence(sc.similarity)

    return MatchResult(
        filename=filename,
        confidence=confidence,
        match_type=match_type,
        needs_review=needs_review(confidence),
        similarity=sc.similarity,
    )


def classify(
    name: str,
    filename: str,
    options: MatchingOptions | None = None,
) -> MatchResult | None:
    """
    Classe un nom de destinataire face à un nom de fichier.

    Ordre de priorité : exact (100), containment (70-95 selon le ratio des
    longueurs), fuzzy (similarité x 100).

    Returns:
        MatchResult, ou None si l'un des deux côtés est vide après normalisation.
    """
    opts = options or MatchingOptions()
    norm_name = normalize(name, filler_tokens=opts.filler_tokens)
    norm_file = normalize(filename, filler_tokens=opts.filler_tokens)
    if not norm_name or not norm_file:
        return None
    sc = score(norm_name, norm_file, min_containment_length=opts.min_containment_length)
    return classify_scored(filename, sc)
