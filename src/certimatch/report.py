"""Génération du rapport et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from certimatch import __version__
from certimatch.config import Config
from certimatch.matching.schema import (
    HIGH_CONFIDENCE,
    MEDIUM_CONFIDENCE,
    TIER_HIGH,
    TIER_LOW,
    TIER_MEDIUM,
    ResolveSummary,
)


def build_report_df(
    summary: ResolveSummary,
    config: Config,
    *,
    n_documents: int = 0,
) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : compteurs de la passe, répartition par palier, paramètres,
    horodatage, version.
    """
    opts = config.options
    rows = [
        ("Metric", "Value"),
        ("nb_recipients", summary.total),
        ("nb_documents", n_documents),
        ("nb_skipped", summary.skipped),
        ("nb_attempted", summary.attempted),
        ("nb_matched", summary.matched),
        ("nb_manual_override", summary.overridden),
        ("nb_unmatched", summary.unmatched),
        ("nb_needs_review", summary.needs_review),
        ("nb_high", summary.by_tier[TIER_HIGH]),
        ("nb_medium", summary.by_tier[TIER_MEDIUM]),
        ("nb_low", summary.by_tier[TIER_LOW]),
        ("mapping_incomplete", summary.mapping_incomplete),
        ("", ""),
        ("Parameters", ""),
        ("name_field", config.name_field or ""),
        ("skip_column", config.skip_column or ""),
        ("document_extensions", ", ".join(config.document_extensions)),
        ("filler_tokens", ", ".join(opts.filler_tokens)),
        ("min_containment_length", opts.min_containment_length),
        ("min_confidence", opts.min_confidence),
        ("high_threshold", HIGH_CONFIDENCE),
        ("medium_threshold", MEDIUM_CONFIDENCE),
        ("", ""),
        ("timestamp", datetime.now().isoformat()),
        ("version", __version__),
    ]
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(summary: ResolveSummary) -> None:
    """Affiche un résumé du rapport en console."""
    print("\n=== CertiMatch Report ===")
    if summary.mapping_incomplete:
        print("  ATTENTION: champ du nom non mappé, aucun appariement tenté.")
    print(f"  Destinataires:    {summary.total}")
    print(f"  Ignorés:          {summary.skipped}")
    print(f"  Tentés:           {summary.attempted}")
    print(f"  Appariés:         {summary.matched}")
    print(f"    dont manuels:   {summary.overridden}")
    print(f"  Non appariés:     {summary.unmatched}")
    print(f"  À vérifier:       {summary.needs_review}")
    print(
        f"  Paliers:          High={summary.by_tier[TIER_HIGH]} "
        f"Medium={summary.by_tier[TIER_MEDIUM]} Low={summary.by_tier[TIER_LOW]}"
    )
    print(f"  Version:          {__version__}")
    print(f"  Timestamp:        {datetime.now().isoformat()}")
    print("=========================\n")
