"""Résolution par lot : affectation destinataire -> document, avec overrides manuels."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import replace

from certimatch.config import MatchingOptions
from certimatch.matching.ranker import rank
from certimatch.matching.schema import (
    Assignment,
    AutoAssignment,
    CandidateDocument,
    ManualAssignment,
    MatchResult,
    Recipient,
    ResolveSummary,
)
from certimatch.normalize import safe_str

logger = logging.getLogger(__name__)

NameExtractor = Callable[[Recipient, str], str]


def default_name_extractor(recipient: Recipient, name_field: str) -> str:
    """Lit le champ mappé dans la ligne ; à défaut, le nom déjà extrait."""
    if name_field in recipient.row:
        return safe_str(recipient.row[name_field])
    return recipient.name or ""


class AssignmentTable:
    """
    Table index destinataire -> AutoAssignment | ManualAssignment.

    Chaque lecture-puis-écriture se fait sous verrou, de sorte qu'un override
    posé depuis un autre thread n'est jamais écrasé par un résultat auto.
    """

    def __init__(self) -> None:
        self._entries: dict[int, Assignment] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, index: object) -> bool:
        return index in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssignmentTable):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def get(self, index: int) -> Assignment | None:
        return self._entries.get(index)

    def items(self) -> list[tuple[int, Assignment]]:
        """Entrées triées par index."""
        with self._lock:
            return sorted(self._entries.items())

    def snapshot(self) -> dict[int, Assignment]:
        with self._lock:
            return dict(sorted(self._entries.items()))

    def set_override(self, index: int, filename: str) -> None:
        _validate_override(index, filename)
        with self._lock:
            self._entries[index] = ManualAssignment(filename.strip())

    def clear_override(self, index: int) -> bool:
        """Retire l'override ; retourne False s'il n'y en avait pas."""
        with self._lock:
            if isinstance(self._entries.get(index), ManualAssignment):
                del self._entries[index]
                return True
            return False

    def store_auto(self, index: int, result: MatchResult | None, *, only_if_absent: bool = False) -> bool:
        """
        Enregistre (ou efface si None) un résultat auto.

        Ne touche jamais un override. Avec only_if_absent, ne remplace aucune
        entrée existante. Retourne True si la table a été modifiée.
        """
        with self._lock:
            current = self._entries.get(index)
            if isinstance(current, ManualAssignment):
                return False
            if only_if_absent and current is not None:
                return False
            if result is None:
                return self._entries.pop(index, None) is not None
            self._entries[index] = AutoAssignment(result)
            return True

    def discard(self, index: int) -> None:
        """Retire l'entrée quelle qu'elle soit (destinataire ignoré)."""
        with self._lock:
            self._entries.pop(index, None)


class Resolver:
    """Orchestre le classement de tous les destinataires d'un lot."""

    def __init__(
        self,
        options: MatchingOptions | None = None,
        *,
        extract_name: NameExtractor = default_name_extractor,
    ) -> None:
        self.options = options or MatchingOptions()
        self.extract_name = extract_name
        self.table = AssignmentTable()
        # Overrides conservés hors de la table : un destinataire ignoré puis
        # réintégré retrouve son document forcé.
        self._overrides: dict[int, str] = {}
        self._skipped: set[int] = set()
        self._lock = threading.Lock()

    def resolve_all(
        self,
        recipients: Sequence[Recipient],
        candidates: Sequence[CandidateDocument | str],
        name_field: str | None,
    ) -> ResolveSummary:
        """
        Recalcule tous les destinataires non ignorés et sans override.

        Les résultats auto précédents sont remplacés ; ceux qui ne sont plus
        valides (nom vide, plus de candidat, mapping retiré) sont effacés.

        Returns:
            ResolveSummary de l'état de la table après la passe.
        """
        return self._run(recipients, candidates, name_field, incremental=False)

    def resolve_incremental(
        self,
        recipients: Sequence[Recipient],
        candidates: Sequence[CandidateDocument | str],
        name_field: str | None,
    ) -> ResolveSummary:
        """Ne calcule que les destinataires sans entrée dans la table."""
        return self._run(recipients, candidates, name_field, incremental=True)

    def set_override(self, index: int, filename: str) -> None:
        """Force le document d'un destinataire ; persiste jusqu'à clear_override."""
        with self._lock:
            if index in self._skipped:
                _validate_override(index, filename)
            else:
                self.table.set_override(index, filename)
            self._overrides[index] = filename.strip()
        logger.info("Override manuel: destinataire %d -> %s", index, filename)

    def clear_override(self, index: int) -> bool:
        with self._lock:
            stored = self._overrides.pop(index, None) is not None
            cleared = self.table.clear_override(index) or stored
        if cleared:
            logger.info("Override retiré: destinataire %d", index)
        return cleared

    def summarize(self, recipients: Sequence[Recipient], name_field: str | None) -> ResolveSummary:
        """Compteurs de l'état courant de la table, sans recalcul (attempted reste à 0)."""
        summary = ResolveSummary(total=len(recipients), mapping_incomplete=_is_unmapped(name_field))
        for recipient in recipients:
            if recipient.skipped:
                summary.skipped += 1
                continue
            _count_entry(summary, self.table.get(recipient.index))
        return summary

    def get_assigned_document(self, index: int) -> str | None:
        """Nom du fichier à joindre pour ce destinataire, ou None."""
        if index in self._skipped:
            return None
        entry = self.table.get(index)
        return entry.filename if entry is not None else None

    def overrides(self) -> dict[int, str]:
        """Overrides enregistrés, y compris ceux des destinataires ignorés."""
        with self._lock:
            return dict(sorted(self._overrides.items()))

    def _run(
        self,
        recipients: Sequence[Recipient],
        candidates: Sequence[CandidateDocument | str],
        name_field: str | None,
        *,
        incremental: bool,
    ) -> ResolveSummary:
        _warn_duplicate_filenames(candidates)
        summary = ResolveSummary(total=len(recipients))
        mapping_incomplete = _is_unmapped(name_field)
        summary.mapping_incomplete = mapping_incomplete

        for recipient in recipients:
            idx = recipient.index
            with self._lock:
                if recipient.skipped:
                    self._skipped.add(idx)
                    self.table.discard(idx)
                else:
                    self._skipped.discard(idx)
                    if idx in self._overrides:
                        self.table.set_override(idx, self._overrides[idx])
            if recipient.skipped:
                summary.skipped += 1
                continue

            existing = self.table.get(idx)
            if isinstance(existing, ManualAssignment):
                pass
            elif mapping_incomplete:
                if not incremental:
                    self.table.store_auto(idx, None)
            elif not (incremental and existing is not None):
                name = self.extract_name(recipient, str(name_field)).strip()
                if name:
                    summary.attempted += 1
                    found = rank(name, candidates, self.options)
                    result = replace(found, recipient_index=idx) if found else None
                    logger.debug("Destinataire %d (%r): %r", idx, name, result)
                else:
                    result = None
                    logger.debug("Destinataire %d: nom vide, non apparié", idx)
                self.table.store_auto(idx, result, only_if_absent=incremental)

            _count_entry(summary, self.table.get(idx))

        logger.info(
            "Résolution %s: %d destinataires, %d tentés, %d appariés, %d à vérifier, %d non appariés",
            "incrémentale" if incremental else "complète",
            summary.total,
            summary.attempted,
            summary.matched,
            summary.needs_review,
            summary.unmatched,
        )
        return summary


def _is_unmapped(name_field: str | None) -> bool:
    return not name_field or not str(name_field).strip()


def _count_entry(summary: ResolveSummary, entry: Assignment | None) -> None:
    if entry is None:
        summary.unmatched += 1
    elif isinstance(entry, ManualAssignment):
        summary.matched += 1
        summary.overridden += 1
    else:
        summary.matched += 1
        summary.by_tier[entry.result.tier] += 1
        if entry.result.needs_review:
            summary.needs_review += 1


def _warn_duplicate_filenames(candidates: Sequence[CandidateDocument | str]) -> None:
    seen: set[str] = set()
    for c in candidates:
        filename = c.filename if isinstance(c, CandidateDocument) else str(c)
        if filename in seen:
            logger.warning("Nom de fichier en double parmi les candidats: %s", filename)
        seen.add(filename)


def _validate_override(index: int, filename: str) -> None:
    if index < 0:
        raise ValueError(f"index destinataire doit être >= 0 (got {index})")
    if not filename or not filename.strip():
        raise ValueError("nom de fichier d'override vide")
