"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_FILLER_TOKENS = (
    "certificate",
    "certificates",
    "cert",
    "document",
    "doc",
    "diploma",
    "award",
    "completion",
    "of",
)
DEFAULT_DOCUMENT_EXTENSIONS = (".pdf",)
DEFAULT_MIN_CONTAINMENT_LENGTH = 3


class CertiMatchError(Exception):
    """Exception de base pour CertiMatch."""


class ConfigError(CertiMatchError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(CertiMatchError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


@dataclass
class MatchingOptions:
    """Paramètres du résolveur (normalisation, containment, seuil)."""

    filler_tokens: tuple[str, ...] = DEFAULT_FILLER_TOKENS
    min_containment_length: int = DEFAULT_MIN_CONTAINMENT_LENGTH
    min_confidence: int = 0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> MatchingOptions:
        raw_fillers = d.get("filler_tokens", DEFAULT_FILLER_TOKENS)
        if not isinstance(raw_fillers, (list, tuple)):
            raise ConfigError(f"filler_tokens doit être une liste (got {type(raw_fillers).__name__})")
        fillers = tuple(str(t).strip().lower() for t in raw_fillers if str(t).strip())

        min_containment_length = int(d.get("min_containment_length", DEFAULT_MIN_CONTAINMENT_LENGTH))
        min_confidence = int(d.get("min_confidence", 0))

        if min_containment_length < 1:
            raise ConfigError(f"min_containment_length doit être >= 1 (got {min_containment_length})")
        if not 0 <= min_confidence <= 100:
            raise ConfigError(f"min_confidence doit être entre 0 et 100 (got {min_confidence})")

        return cls(
            filler_tokens=fillers,
            min_containment_length=min_containment_length,
            min_confidence=min_confidence,
        )


@dataclass
class Config:
    """Configuration principale de CertiMatch."""

    recipients_file: str = ""
    recipients_sheet: str | None = None  # None = première feuille
    header_row: int = 1
    documents_dir: str = ""
    document_extensions: tuple[str, ...] = DEFAULT_DOCUMENT_EXTENSIONS
    name_field: str | None = None  # None = mapping incomplet
    skip_column: str | None = None
    options: MatchingOptions = field(default_factory=MatchingOptions)
    overrides: dict[int, str] = field(default_factory=dict)  # index destinataire -> nom de fichier

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        recipients_file = d.get("recipients_file", "")
        documents_dir = d.get("documents_dir", "")
        header_row = int(d.get("header_row", 1))
        name_field = d.get("name_field") or None
        skip_column = d.get("skip_column") or None

        if not recipients_file or not documents_dir:
            raise ConfigError("recipients_file et documents_dir requis")
        if header_row < 1:
            raise ConfigError(f"header_row doit être >= 1 (got {header_row})")

        raw_exts = d.get("document_extensions", list(DEFAULT_DOCUMENT_EXTENSIONS))
        if not isinstance(raw_exts, (list, tuple)) or not raw_exts:
            raise ConfigError("document_extensions doit être une liste non vide")
        extensions: list[str] = []
        for ext in raw_exts:
            ext = str(ext).strip().lower()
            if not ext.startswith(".") or len(ext) < 2:
                raise ConfigError(f"extension invalide: {ext!r} (attendu: '.pdf', '.png', ...)")
            extensions.append(ext)

        overrides = _parse_overrides(d.get("overrides", {}))

        return cls(
            recipients_file=recipients_file,
            recipients_sheet=d.get("recipients_sheet"),
            header_row=header_row,
            documents_dir=documents_dir,
            document_extensions=tuple(extensions),
            name_field=name_field,
            skip_column=skip_column,
            options=MatchingOptions.from_dict(d),
            overrides=overrides,
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Modifie recipients_file et documents_dir en place.
        """
        base = Path(base_dir)
        if self.recipients_file and not Path(self.recipients_file).is_absolute():
            self.recipients_file = str((base / self.recipients_file).resolve())
        if self.documents_dir and not Path(self.documents_dir).is_absolute():
            self.documents_dir = str((base / self.documents_dir).resolve())


def _parse_overrides(raw: Any) -> dict[int, str]:
    """Convertit {"3": "doc_b.pdf"} en {3: "doc_b.pdf"} en validant les index."""
    if not isinstance(raw, dict):
        raise ConfigError(f"overrides doit être un objet JSON (got {type(raw).__name__})")
    overrides: dict[int, str] = {}
    for key, filename in raw.items():
        try:
            idx = int(key)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"index d'override invalide: {key!r}") from e
        if idx < 0:
            raise ConfigError(f"index d'override doit être >= 0 (got {idx})")
        if not isinstance(filename, str) or not filename.strip():
            raise ConfigError(f"override {idx}: nom de fichier vide")
        overrides[idx] = filename.strip()
    return overrides
