"""Settings, logging and CLI entry point."""

import logging

from opsauth import __version__
from opsauth.config import Settings
from opsauth.logging_config import configure_logging
from opsauth.main import main


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("INVITATION_EXPIRY_DAYS", "3")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example.com, ,https://b.example.com")
    settings = Settings(_env_file=None)
    assert settings.invitation_expiry_days == 3
    assert settings.cors_origin_list == ["https://a.example.com", "https://b.example.com"]
    assert settings.invitation_webhook_url == ""


def test_configure_logging_quiets_noisy_loggers() -> None:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)


def test_cli_version(capsys) -> None:
    main(["version"])
    assert capsys.readouterr().out.strip() == f"opsauth v{__version__}"
