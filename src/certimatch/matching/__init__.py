"""Module de matching : normalisation, scores, classement, résolution par lot."""

from certimatch.matching.classifier import classify
from certimatch.matching.ranker import rank
from certimatch.matching.resolver import AssignmentTable, Resolver
from certimatch.matching.schema import (
    AutoAssignment,
    CandidateDocument,
    ManualAssignment,
    MatchResult,
    Recipient,
    ResolveSummary,
)
from certimatch.matching.scorers import SimilarityScore, score

__all__ = [
    "AssignmentTable",
    "AutoAssignment",
    "CandidateDocument",
    "ManualAssignment",
    "MatchResult",
    "Recipient",
    "ResolveSummary",
    "Resolver",
    "SimilarityScore",
    "classify",
    "rank",
    "score",
]
