"""Tests du module report."""

import pandas as pd
import pytest

from certimatch.config import Config
from certimatch.matching.schema import ResolveSummary
from certimatch.report import build_report_df, print_report_console


@pytest.fixture
def sample_summary() -> ResolveSummary:
    return ResolveSummary(
        total=6,
        skipped=1,
        attempted=4,
        matched=4,
        unmatched=1,
        needs_review=1,
        overridden=1,
        by_tier={"High": 2, "Medium": 0, "Low": 1},
    )


@pytest.fixture
def sample_config() -> Config:
    return Config(recipients_file="r.xlsx", documents_dir="docs", name_field="Nom")


def _value(df: pd.DataFrame, key: str) -> object:
    return df[df["Key"] == key]["Value"].values[0]


def test_build_report_df_counts(sample_summary: ResolveSummary, sample_config: Config) -> None:
    df = build_report_df(sample_summary, sample_config, n_documents=12)
    assert _value(df, "nb_recipients") == 6
    assert _value(df, "nb_documents") == 12
    assert _value(df, "nb_skipped") == 1
    assert _value(df, "nb_matched") == 4
    assert _value(df, "nb_manual_override") == 1
    assert _value(df, "nb_needs_review") == 1
    assert _value(df, "nb_high") == 2
    assert _value(df, "nb_low") == 1


def test_build_report_df_contains_params(sample_summary: ResolveSummary, sample_config: Config) -> None:
    df = build_report_df(sample_summary, sample_config)
    keys = df["Key"].tolist()
    assert "name_field" in keys
    assert "high_threshold" in keys
    assert "medium_threshold" in keys
    assert "version" in keys
    assert "timestamp" in keys
    assert _value(df, "high_threshold") == 90
    assert _value(df, "medium_threshold") == 70


def test_print_report_console(sample_summary: ResolveSummary, capsys: pytest.CaptureFixture) -> None:
    print_report_console(sample_summary)
    out = capsys.readouterr().out
    assert "CertiMatch Report" in out
    assert "Destinataires" in out
    assert "6" in out
    assert "non mappé" not in out


def test_print_report_console_mapping_incomplete(capsys: pytest.CaptureFixture) -> None:
    print_report_console(ResolveSummary(total=3, unmatched=3, mapping_incomplete=True))
    out = capsys.readouterr().out
    assert "non mappé" in out
