"""Interface en ligne de commande CertiMatch."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

import pandas as pd

from certimatch import __version__
from certimatch.config import CertiMatchError, Config
from certimatch.io_excel import list_documents, list_sheets, load_recipients, save_xlsx
from certimatch.matching.ranker import rank, rank_candidates
from certimatch.matching.resolver import Resolver
from certimatch.matching.schema import AutoAssignment, CandidateDocument, Recipient
from certimatch.report import build_report_df, print_report_console
from certimatch.transfer import build_mapping_csv, transfer_assignments

logger = logging.getLogger(__name__)


def _validate_columns(config: Config, df: pd.DataFrame) -> None:
    """Avertit si les colonnes configurées sont absentes du tableur."""
    missing: list[str] = []
    if config.name_field and config.name_field not in df.columns:
        missing.append(f"name_field.{config.name_field}")
    if config.skip_column and config.skip_column not in df.columns:
        missing.append(f"skip_column.{config.skip_column}")
    if missing:
        print(f"Avertissement: colonnes absentes: {', '.join(missing)}")


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    sheets = list_sheets(filepath)
    print(f"Feuilles dans {filepath}:")
    for s in sheets:
        print(f"  - {s}")
    return 0


def cmd_match(name: str, filenames: Sequence[str]) -> int:
    """Classe un nom face à une liste de noms de fichiers et affiche le résultat."""
    result = rank(name, list(filenames))
    if result is None:
        print(f"{name!r}: aucun document (nom vide ou aucun candidat)")
        return 0
    review = " - à vérifier" if result.needs_review else ""
    print(f"{name!r} -> {result.filename} [{result.match_type}, {result.confidence}% {result.tier}]{review}")
    return 0


def interactive_review(
    resolver: Resolver,
    recipients: Sequence[Recipient],
    candidates: Sequence[CandidateDocument],
    top_k: int = 5,
) -> int:
    """
    Mode interactif : pour chaque affectation auto sous le palier High, demande le choix de l'opérateur.

    Un choix de candidat devient un override manuel ; 0 retire le document
    proposé ; s laisse l'affectation telle quelle.

    Returns:
        Nombre de destinataires modifiés.
    """
    changed = 0
    for rec in recipients:
        entry = resolver.table.get(rec.index)
        if not isinstance(entry, AutoAssignment) or not entry.result.flagged:
            continue
        ranked = rank_candidates(rec.name, candidates, resolver.options)[:top_k]

        print("\n" + "=" * 60)
        print(f"Destinataire #{rec.index}: {rec.name}")
        print(f"Proposition: {entry.result.filename} ({entry.result.match_type}, {entry.result.confidence}%)")
        print("\nCandidats:")
        for i, r in enumerate(ranked):
            print(f"  [{i + 1}] {r.filename} - {r.match_type} {r.confidence}%")
        print("  [0] Aucun document")
        print("  [s] Laisser tel quel")

        while True:
            inp = input(f"Choix (1-{len(ranked)} / 0 / s): ").strip()
            if inp.lower() == "s":
                break
            if inp == "0":
                resolver.table.store_auto(rec.index, None)
                changed += 1
                break
            try:
                idx = int(inp)
                if 1 <= idx <= len(ranked):
                    resolver.set_override(rec.index, ranked[idx - 1].filename)
                    changed += 1
                    break
            except ValueError:
                pass
            print("Choix invalide, réessayez.")
    return changed


def cmd_run(
    config_path: str,
    output_path: str | None,
    *,
    dry_run: bool = False,
    interactive: bool = False,
    mapping_path: str | None = None,
) -> int:
    """Exécute le pipeline CertiMatch."""
    config = Config.load(config_path)
    df_recipients, recipients = load_recipients(config)
    _validate_columns(config, df_recipients)
    candidates = list_documents(config.documents_dir, config.document_extensions)
    logger.info("%d destinataires, %d documents candidats", len(recipients), len(candidates))

    resolver = Resolver(config.options)
    for idx, filename in sorted(config.overrides.items()):
        resolver.set_override(idx, filename)
    summary = resolver.resolve_all(recipients, candidates, config.name_field)

    if interactive and interactive_review(resolver, recipients, candidates):
        attempted = summary.attempted
        summary = resolver.summarize(recipients, config.name_field)
        summary.attempted = attempted

    # Générer mapping.csv (--mapping prime s'il est fourni)
    map_path = (
        Path(mapping_path)
        if mapping_path
        else (Path(output_path).parent / "mapping.csv" if output_path else Path(config_path).parent / "mapping.csv")
    )
    build_mapping_csv(resolver.table, recipients, str(map_path))
    print(f"Mapping écrit: {map_path}")

    print_report_console(summary)

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.")
        return 1

    df_annotated = transfer_assignments(df_recipients, resolver.table)
    report_df = build_report_df(summary, config, n_documents=len(candidates))
    save_xlsx(output_path, {"Recipients": df_annotated, "REPORT": report_df})
    print(f"Fichier de sortie: {output_path}")

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="certimatch",
        description="Appariement destinataires / certificats (matching de noms de fichiers)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée (DEBUG)")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # list-sheets
    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un tableur")
    p_list.add_argument("file", help="Fichier xlsx/xls/ods/csv")

    # match
    p_match = subparsers.add_parser("match", help="Apparier un nom à une liste de fichiers")
    p_match.add_argument("name", help="Nom du destinataire")
    p_match.add_argument("files", nargs="+", help="Noms de fichiers candidats")

    # run
    p_run = subparsers.add_parser("run", help="Apparier tous les destinataires")
    p_run.add_argument("--config", "-c", required=True, help="Fichier config JSON")
    p_run.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")
    p_run.add_argument("--interactive", "-i", action="store_true", help="Validation interactive des cas à vérifier")
    p_run.add_argument("--mapping", "-m", help="Chemin pour mapping.csv")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)

        if args.command == "match":
            return cmd_match(args.name, args.files)

        if args.command == "run":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            return cmd_run(
                args.config,
                args.output,
                dry_run=args.dry_run,
                interactive=args.interactive,
                mapping_path=args.mapping,
            )
    except CertiMatchError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
