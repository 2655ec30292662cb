from __future__ import annotations

import logging
from pathlib import Path

import pytest

import explore


@pytest.fixture
def dataset_path(sample_text: str, tmp_path: Path) -> str:
    path = tmp_path / "dataset.txt"
    path.write_text(sample_text, encoding="utf-8")
    return str(path)


def test_entity_filter(dataset_path: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert explore.main([dataset_path, "--entity", "OrgX"]) == 0
    out = capsys.readouterr().out
    assert "1 report(s)" in out
    assert "[A1] 1998-03-01" in out
    assert "Linked entities:\n  Alice" in out


def test_location_filter_marks_bar(dataset_path: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert explore.main([dataset_path, "--location", "CityA"]) == 0
    out = capsys.readouterr().out
    assert "[A2]" in out and "[A1]" not in out
    assert " *CityA: 1" in out


def test_time_range(dataset_path: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert explore.main([dataset_path, "--start", "1998-01-01", "--end", "1998-03-31"]) == 0
    assert "1 report(s)" in capsys.readouterr().out


def test_start_requires_end(dataset_path: str) -> None:
    with pytest.raises(SystemExit):
        explore.main([dataset_path, "--start", "1998-01-01"])


def test_missing_dataset_exits_1(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert explore.main([str(tmp_path / "missing.txt")]) == 1
    assert "Failed to load data" in capsys.readouterr().err


@pytest.fixture
def root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_verbose_enables_debug_logging(dataset_path: str, root_level: logging.Logger) -> None:
    assert explore.main([dataset_path, "--verbose"]) == 0
    assert root_level.getEffectiveLevel() == logging.DEBUG


def test_default_logging_is_info(dataset_path: str, root_level: logging.Logger) -> None:
    assert explore.main([dataset_path]) == 0
    assert root_level.getEffectiveLevel() == logging.INFO


def test_bad_alias_map_exits_1(dataset_path: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                               capsys: pytest.CaptureFixture[str]) -> None:
    bad = tmp_path / "aliases.json"
    bad.write_text("{not json", encoding="utf-8")
    monkeypatch.setenv("ALIAS_MAP_PATH", str(bad))
    assert explore.main([dataset_path]) == 1
    assert "aliases.json" in capsys.readouterr().err
