from __future__ import annotations

import sys

import pytest
from loguru import logger

from brainbender.__main__ import main


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("YOUTUBE_CLIENT_ID", "client-xyz")
    monkeypatch.setenv("YOUTUBE_CLIENT_SECRET", "secret")
    monkeypatch.setenv("WORK_DIR", str(tmp_path / "work"))
    monkeypatch.setenv("TTS_PROVIDER", "none")
    monkeypatch.setenv("RENDER_MODE", "still")
    monkeypatch.setenv("LOG_LEVEL", "CRITICAL")
    for key in ("YOUTUBE_REFRESH_TOKEN", "FONT_FILE", "SCHEDULE_TIMES", "LOG_DIR", "RIDDLES_FILE"):
        monkeypatch.delenv(key, raising=False)
    yield monkeypatch
    logger.remove()
    logger.add(sys.stderr)


def test_auth_url_mode_prints_consent_url(cli_env, capsys) -> None:
    assert main(["--mode", "auth-url"]) == 0

    out = capsys.readouterr().out.strip()
    assert out.startswith("https://accounts.google.com/")
    assert "client-xyz" in out


def test_make_mode_reports_failure_with_exit_code(cli_env, tmp_path, capsys) -> None:
    cli_env.setenv("FFMPEG_BIN", str(tmp_path / "no-ffmpeg"))

    assert main(["--mode", "make"]) == 1
    assert list((tmp_path / "work").iterdir()) == []
    assert capsys.readouterr().out == ""


def test_auth_url_mode_without_client_fails_cleanly(cli_env, capsys) -> None:
    cli_env.delenv("YOUTUBE_CLIENT_ID")
    cli_env.delenv("YOUTUBE_CLIENT_SECRET")

    assert main(["--mode", "auth-url"]) == 1
    assert capsys.readouterr().out == ""
