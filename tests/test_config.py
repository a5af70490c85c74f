"""Tests du module config."""

from pathlib import Path

import pytest

from certimatch.config import DEFAULT_FILLER_TOKENS, Config, ConfigError, MatchingOptions


def _base(**extra: object) -> dict[str, object]:
    d: dict[str, object] = {"recipients_file": "r.xlsx", "documents_dir": "docs"}
    d.update(extra)
    return d


def test_config_defaults() -> None:
    config = Config.from_dict(_base())
    assert config.name_field is None
    assert config.document_extensions == (".pdf",)
    assert config.options.filler_tokens == DEFAULT_FILLER_TOKENS
    assert config.options.min_containment_length == 3
    assert config.options.min_confidence == 0
    assert config.overrides == {}


def test_config_resolve_paths(tmp_path: Path) -> None:
    """Les chemins relatifs sont résolus par rapport au dossier du fichier config."""
    config_dir = tmp_path / "mon_projet"
    config_dir.mkdir()
    config = Config(recipients_file="data/recipients.xlsx", documents_dir="pdfs")
    config.resolve_paths(config_dir)
    assert Path(config.recipients_file).name == "recipients.xlsx"
    assert Path(config.recipients_file).parent.parent == config_dir.resolve()
    assert Path(config.documents_dir) == (config_dir / "pdfs").resolve()


def test_config_load_resolves_paths(tmp_path: Path) -> None:
    """Config.load() résout automatiquement les chemins relatifs."""
    config_path = tmp_path / "config.json"
    config_path.write_text(
        """
        {
            "recipients_file": "data/recipients.xlsx",
            "documents_dir": "pdfs",
            "name_field": "Nom",
            "overrides": {"3": "doc_b.pdf"}
        }
    """,
        encoding="utf-8",
    )
    config = Config.load(config_path)
    assert Path(config.recipients_file).is_absolute()
    assert Path(config.documents_dir).is_absolute()
    assert config.name_field == "Nom"
    assert config.overrides == {3: "doc_b.pdf"}


def test_config_options() -> None:
    config = Config.from_dict(
        _base(filler_tokens=["Award", " "], min_containment_length=4, min_confidence=70)
    )
    assert config.options == MatchingOptions(filler_tokens=("award",), min_containment_length=4, min_confidence=70)


def test_config_extensions_normalized() -> None:
    config = Config.from_dict(_base(document_extensions=[".PDF", ".png"]))
    assert config.document_extensions == (".pdf", ".png")


def test_config_validation_missing_files() -> None:
    with pytest.raises(ConfigError, match="recipients_file et documents_dir requis"):
        Config.from_dict({"name_field": "Nom"})


def test_config_validation_bad_extension() -> None:
    with pytest.raises(ConfigError, match="extension invalide"):
        Config.from_dict(_base(document_extensions=["pdf"]))
    with pytest.raises(ConfigError, match="document_extensions"):
        Config.from_dict(_base(document_extensions=[]))


def test_config_validation_min_confidence() -> None:
    with pytest.raises(ConfigError, match="min_confidence"):
        Config.from_dict(_base(min_confidence=150))


def test_config_validation_min_containment_length() -> None:
    with pytest.raises(ConfigError, match="min_containment_length"):
        Config.from_dict(_base(min_containment_length=0))


def test_config_validation_header_row() -> None:
    with pytest.raises(ConfigError, match="header_row"):
        Config.from_dict(_base(header_row=0))


def test_config_validation_overrides() -> None:
    with pytest.raises(ConfigError, match="index d'override invalide"):
        Config.from_dict(_base(overrides={"abc": "a.pdf"}))
    with pytest.raises(ConfigError, match=">= 0"):
        Config.from_dict(_base(overrides={"-1": "a.pdf"}))
    with pytest.raises(ConfigError, match="nom de fichier vide"):
        Config.from_dict(_base(overrides={"2": ""}))
    with pytest.raises(ConfigError, match="objet JSON"):
        Config.from_dict(_base(overrides=["a.pdf"]))


def test_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        Config.from_dict({})
