"""Schémas et types pour le matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

MATCH_EXACT = "exact"
MATCH_PDF_CONTAINS = "pdf_contains"  # le nom de fichier contient le nom
MATCH_NAME_CONTAINS = "name_contains"  # le nom contient le nom de fichier
MATCH_FUZZY = "fuzzy"
VALID_MATCH_TYPES = frozenset({MATCH_EXACT, MATCH_PDF_CONTAINS, MATCH_NAME_CONTAINS, MATCH_FUZZY})

# Seuils affichés dans l'interface : ne pas modifier sans mettre à jour les consommateurs.
HIGH_CONFIDENCE = 90
MEDIUM_CONFIDENCE = 70

TIER_HIGH = "High"
TIER_MEDIUM = "Medium"
TIER_LOW = "Low"


def confidence_tier(confidence: int) -> str:
    """Palier de confiance : High (>= 90), Medium (70-89), Low (< 70)."""
    if confidence >= HIGH_CONFIDENCE:
        return TIER_HIGH
    if confidence >= MEDIUM_CONFIDENCE:
        return TIER_MEDIUM
    return TIER_LOW


def needs_review(confidence: int) -> bool:
    """Une confirmation humaine est requise sous le palier Medium."""
    return confidence < MEDIUM_CONFIDENCE


@dataclass
class Recipient:
    """Un destinataire (une ligne du tableur)."""

    index: int
    name: str = ""
    skipped: bool = False
    row: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CandidateDocument:
    """Un document candidat ; seul le nom de fichier sert au matching."""

    filename: str
    content: bytes = b""

    def __repr__(self) -> str:
        return f"CandidateDocument({self.filename!r}, {len(self.content)} octets)"


@dataclass(frozen=True)
class MatchResult:
    """
    Meilleur document retenu pour un destinataire.

    recipient_index vaut -1 tant que le résultat n'est pas rattaché à une
    ligne (sortie directe de classify/rank).
    """

    filename: str
    confidence: int
    match_type: str  # exact, pdf_contains, name_contains, fuzzy
    needs_review: bool
    similarity: float = 0.0  # ratio Levenshtein brut, 0-1
    recipient_index: int = -1

    def __repr__(self) -> str:
        return (
            f"MatchResult(recipient={self.recipient_index}, file={self.filename!r}, "
            f"{self.match_type}, confidence={self.confidence})"
        )

    @property
    def tier(self) -> str:
        return confidence_tier(self.confidence)

    @property
    def flagged(self) -> bool:
        """Sous le palier High (Medium ou Low) : à confirmer par l'opérateur."""
        return self.confidence < HIGH_CONFIDENCE


@dataclass(frozen=True)
class AutoAssignment:
    """Affectation calculée par le résolveur."""

    result: MatchResult

    @property
    def filename(self) -> str:
        return self.result.filename


@dataclass(frozen=True)
class ManualAssignment:
    """Affectation forcée par l'opérateur, jamais recalculée."""

    filename: str


Assignment = Union[AutoAssignment, ManualAssignment]


@dataclass
class ResolveSummary:
    """Compteurs d'une passe du résolveur, pour les bandeaux de progression."""

    total: int = 0
    skipped: int = 0
    attempted: int = 0
    matched: int = 0
    unmatched: int = 0
    needs_review: int = 0
    overridden: int = 0
    mapping_incomplete: bool = False
    by_tier: dict[str, int] = field(default_factory=lambda: {TIER_HIGH: 0, TIER_MEDIUM: 0, TIER_LOW: 0})
