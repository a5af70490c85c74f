"""I/O : tableur des destinataires (Excel, ODS, CSV) et dossier des documents."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from certimatch.config import DEFAULT_DOCUMENT_EXTENSIONS, CertiMatchError, Config
from certimatch.matching.schema import CandidateDocument, Recipient
from certimatch.normalize import safe_str

SUPPORTED_INPUT_EXTENSIONS = (".xlsx", ".xls", ".ods", ".csv")
TRUTHY_SKIP_VALUES = frozenset({"1", "x", "true", "yes", "y", "oui", "o"})

logger = logging.getLogger(__name__)


class SpreadsheetFileError(CertiMatchError):
    """Erreur de chargement d'un fichier (fichier absent, feuille inexistante, dossier absent)."""


class ExcelDependencyError(SpreadsheetFileError):
    """Moteur de lecture optionnel absent (xlrd, odfpy)."""


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix in (".ods", ".odt"):
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str, *, skip_rows: int = 0) -> str | None:
    try:
        with path.open("r", encoding=encoding, errors="replace") as f:
            for _ in range(skip_rows):
                if f.readline() == "":
                    return None
            sample_lines: list[str] = []
            for line in f:
                if line.strip() == "":
                    continue
                sample_lines.append(line)
                if len(sample_lines) >= 5:
                    break
    except OSError:
        return None
    if not sample_lines:
        return None
    sample = "".join(sample_lines)
    try:
        return csv.Sniffer().sniff(sample, delimiters=[",", ";", "\t", "|"]).delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in [",", ";", "\t", "|"]}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else None


def _open_excel(path: Path) -> pd.ExcelFile:
    try:
        engine = _get_engine(path)
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise ExcelDependencyError(f"Format .xls requis: pip install xlrd. Détail: {e}") from e
        if ext in (".ods", ".odt"):
            raise ExcelDependencyError(f"Format ODS requis: pip install odfpy. Détail: {e}") from e
        raise SpreadsheetFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise SpreadsheetFileError(f"Impossible de lire le fichier {path}: {e}") from e


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Formats supportés : .xlsx, .xls, .ods, .csv (une seule "feuille" pour CSV).

    Raises:
        SpreadsheetFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise SpreadsheetFileError(f"Fichier introuvable: {path}")
    if _is_csv(path):
        return ["(données)"]
    xl = _open_excel(path)
    return [str(s) for s in xl.sheet_names]


def load_sheet(
    filepath: str | Path,
    sheet_name: str | None = None,
    *,
    header_row: int = 1,
) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte.

    Formats supportés : .xlsx, .xls, .ods, .csv.

    Args:
        filepath: Chemin vers le fichier.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.
        header_row: Numéro de ligne (1-based) contenant les en-têtes.

    Returns:
        DataFrame chargé (toutes les colonnes en str).

    Raises:
        SpreadsheetFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise SpreadsheetFileError(f"Fichier introuvable: {path}")
    if path.suffix.lower() not in SUPPORTED_INPUT_EXTENSIONS:
        raise SpreadsheetFileError(f"Format non supporté: {path.suffix} ({path})")

    header_idx = max(header_row - 1, 0)
    if _is_csv(path):
        skip = range(header_idx) if header_idx > 0 else None
        for encoding in ("utf-8", "latin-1"):
            delimiter = _detect_csv_delimiter(path, encoding, skip_rows=header_idx) or ","
            try:
                return pd.read_csv(path, dtype=str, encoding=encoding, skiprows=skip, sep=delimiter)
            except UnicodeDecodeError:
                logger.debug("CSV %s: encodage %s refusé", path, encoding)
                continue
            except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
                raise SpreadsheetFileError(
                    f"Erreur CSV {path}: {e}. Vérifiez la ligne d'en-tête et le séparateur."
                ) from e
        raise SpreadsheetFileError(f"Erreur CSV {path}: encodage non reconnu")

    xl = _open_excel(path)
    if sheet_name is None:
        sheet_name = str(xl.sheet_names[0])
    elif sheet_name not in xl.sheet_names:
        sheets = [str(s) for s in xl.sheet_names]
        raise SpreadsheetFileError(
            f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}"
        )

    try:
        return pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=header_idx)
    except Exception as e:
        raise SpreadsheetFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuille à 31 caractères
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index)


def _is_truthy(val: object) -> bool:
    return safe_str(val).strip().lower() in TRUTHY_SKIP_VALUES


def extract_recipients(
    df: pd.DataFrame,
    name_field: str | None,
    *,
    skip_column: str | None = None,
    skipped: set[int] | None = None,
) -> list[Recipient]:
    """
    Construit un Recipient par ligne du DataFrame.

    Le nom vient de la colonne name_field ; colonne absente ou non mappée
    donne un nom vide. Une ligne est ignorée si son index est dans skipped ou
    si la cellule skip_column est "vraie" (1, x, oui, true...).
    """
    skipped = skipped or set()
    has_name = bool(name_field) and name_field in df.columns
    has_skip = bool(skip_column) and skip_column in df.columns
    recipients: list[Recipient] = []
    for pos, (_, row) in enumerate(df.iterrows()):
        row_dict = {str(k): v for k, v in row.items()}
        name = safe_str(row[name_field]).strip() if has_name else ""
        is_skipped = pos in skipped or (has_skip and _is_truthy(row[skip_column]))
        recipients.append(Recipient(index=pos, name=name, skipped=is_skipped, row=row_dict))
    return recipients


def list_documents(
    directory: str | Path,
    extensions: tuple[str, ...] = DEFAULT_DOCUMENT_EXTENSIONS,
    *,
    read_content: bool = False,
) -> list[CandidateDocument]:
    """
    Liste les documents candidats d'un dossier, triés par nom de fichier.

    Le contenu n'est lu que si read_content est vrai.

    Raises:
        SpreadsheetFileError: Si le dossier est absent.
    """
    path = Path(directory)
    if not path.is_dir():
        raise SpreadsheetFileError(f"Dossier de documents introuvable: {path}")
    wanted = {e.lower() for e in extensions}
    files = sorted(
        (p for p in path.iterdir() if p.is_file() and p.suffix.lower() in wanted),
        key=lambda p: p.name,
    )
    logger.debug("%d documents dans %s (%s)", len(files), path, ", ".join(sorted(wanted)))
    return [CandidateDocument(p.name, p.read_bytes() if read_content else b"") for p in files]


def load_recipients(config: Config) -> tuple[pd.DataFrame, list[Recipient]]:
    """
    Charge le tableur des destinataires selon la configuration.

    Returns:
        (df_recipients, recipients)
    """
    df = load_sheet(config.recipients_file, config.recipients_sheet, header_row=config.header_row)
    recipients = extract_recipients(df, config.name_field, skip_column=config.skip_column)
    return df, recipients
