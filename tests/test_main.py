"""Tests for the CLI entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from mergekeeper.adapters.base import GitPlatformError
from mergekeeper.main import main, parse_args
from mergekeeper.observer import MergeResult

MERGE_SECTION = {
    "owner": "octo",
    "repo": "app",
    "pull_request_number": 7,
    "sha": "abc123",
    "interval_seconds": 10,
    "timeout_seconds": 30,
}


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"merge": MERGE_SECTION}))
    return path


def test_parse_args_defaults() -> None:
    args = parse_args([])
    assert args.config == Path("config.yaml")
    assert args.check is False
    assert args.dry_run is False


def test_check_only(config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with patch("mergekeeper.main.Merger") as merger_cls:
        assert main(["--config", str(config_path), "--check"]) == 0
    merger_cls.assert_not_called()
    assert "octo/app" in capsys.readouterr().out


def test_invalid_config_returns_2(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"merge": {"owner": "octo"}}))
    assert main(["-c", str(path)]) == 2


def test_missing_token_returns_2(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN_FILE", raising=False)
    with patch("mergekeeper.main.Merger") as merger_cls:
        assert main(["-c", str(config_path)]) == 2
    merger_cls.assert_not_called()


def test_runs_merge(config_path: Path) -> None:
    with patch("mergekeeper.main.Merger") as merger_cls:
        merger_cls.return_value.merge.return_value = MergeResult(merged=True)
        assert main(["-c", str(config_path)]) == 0
    cfg = merger_cls.call_args[0][0]
    assert cfg.full_name == "octo/app"
    assert cfg.dry_run is False
    merger_cls.return_value.merge.assert_called_once()


def test_dry_run_flag_overrides_config(config_path: Path) -> None:
    with patch("mergekeeper.main.Merger") as merger_cls:
        assert main(["-c", str(config_path), "--dry-run"]) == 0
    assert merger_cls.call_args[0][0].dry_run is True


def test_merge_failure_returns_1(config_path: Path) -> None:
    with patch("mergekeeper.main.Merger") as merger_cls:
        merger_cls.return_value.merge.side_effect = GitPlatformError("405: not mergeable", 405)
        assert main(["-c", str(config_path)]) == 1


def test_malformed_yaml_returns_2(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("merge: [owner: octo\n")
    with patch("mergekeeper.main.Merger") as merger_cls:
        assert main(["-c", str(path)]) == 2
    merger_cls.assert_not_called()


def test_unreadable_token_file_returns_2(config_path: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("GITHUB_TOKEN_FILE", str(tmp_path / "missing-token"))
    with patch("mergekeeper.main.Merger") as merger_cls:
        assert main(["-c", str(config_path)]) == 2
    merger_cls.assert_not_called()
