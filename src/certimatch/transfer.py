"""Report des affectations dans le tableur des destinataires et mapping.csv."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from certimatch.matching.resolver import AssignmentTable
from certimatch.matching.schema import Assignment, AutoAssignment, ManualAssignment, Recipient

ASSIGNMENT_COLUMNS = ("document", "confidence", "match_type", "needs_review", "assignment")

SOURCE_AUTO = "auto"
SOURCE_MANUAL = "manual"
SOURCE_NONE = "none"


def _describe(entry: Assignment | None) -> dict[str, object]:
    """Valeurs des colonnes d'export pour une entrée de la table."""
    if isinstance(entry, AutoAssignment):
        r = entry.result
        return {
            "document": r.filename,
            "confidence": r.confidence,
            "match_type": r.match_type,
            "tier": r.tier,
            "needs_review": r.needs_review,
            "assignment": SOURCE_AUTO,
        }
    if isinstance(entry, ManualAssignment):
        return {
            "document": entry.filename,
            "confidence": pd.NA,
            "match_type": "",
            "tier": "",
            "needs_review": False,
            "assignment": SOURCE_MANUAL,
        }
    return {
        "document": "",
        "confidence": pd.NA,
        "match_type": "",
        "tier": "",
        "needs_review": False,
        "assignment": SOURCE_NONE,
    }


def transfer_assignments(
    df_recipients: pd.DataFrame,
    table: AssignmentTable,
    *,
    suffix_on_collision: str = "_match",
) -> pd.DataFrame:
    """
    Ajoute au tableur des destinataires les colonnes d'affectation.

    Colonnes : document, confidence, match_type, needs_review, assignment
    (auto / manual / none). Les lignes sont repérées par leur position.

    Args:
        df_recipients: DataFrame des destinataires (copie, non modifié).
        table: Table d'affectation issue du résolveur.
        suffix_on_collision: Suffixe si une colonne du même nom existe déjà.

    Returns:
        Nouveau DataFrame enrichi.
    """
    out = df_recipients.copy()
    described = [_describe(table.get(pos)) for pos in range(len(out))]
    for col in ASSIGNMENT_COLUMNS:
        target_col = col + suffix_on_collision if col in df_recipients.columns else col
        out[target_col] = [d[col] for d in described]
    return out


def build_mapping_csv(
    table: AssignmentTable,
    recipients: Sequence[Recipient],
    output_path: str,
) -> None:
    """
    Génère mapping.csv : une ligne par destinataire non ignoré.

    Colonnes : recipient_index, name, filename, confidence, match_type, tier,
    needs_review, source.
    """
    rows = []
    for rec in recipients:
        if rec.skipped:
            continue
        d = _describe(table.get(rec.index))
        rows.append(
            {
                "recipient_index": rec.index,
                "name": rec.name,
                "filename": d["document"],
                "confidence": d["confidence"],
                "match_type": d["match_type"],
                "tier": d["tier"],
                "needs_review": d["needs_review"],
                "source": d["assignment"],
            }
        )
    columns = ["recipient_index", "name", "filename", "confidence", "match_type", "tier", "needs_review", "source"]
    df = pd.DataFrame(rows, columns=columns)
    df.to_csv(output_path, index=False, encoding="utf-8")
