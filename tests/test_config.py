from __future__ import annotations

from pathlib import Path

from runready_admin.config import RunReadyConfig


def test_defaults(monkeypatch) -> None:
    for name in ("RUNREADY_DATA_DIR", "RUNREADY_NOTIFICATIONS", "RUNREADY_CLOCK"):
        monkeypatch.delenv(name, raising=False)

    config = RunReadyConfig.from_env()

    assert config.data_dir == Path("data")
    assert config.notifications_enabled is True
    assert config.twenty_four_hour is False


def test_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("RUNREADY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RUNREADY_NOTIFICATIONS", "false")
    monkeypatch.setenv("RUNREADY_CLOCK", "24H")

    config = RunReadyConfig.from_env()

    assert config.notifications_enabled is False
    assert config.twenty_four_hour is True
    assert config.schedules_path == tmp_path / "schedules.json"
    assert config.templates_path == tmp_path / "templates.json"
    assert config.alerts_path == tmp_path / "alerts.json"
