from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from donorbase.cli import cli


def _mock_settings(**overrides):
    settings = MagicMock()
    settings.host = "0.0.0.0"
    settings.port = 8000
    settings.workers = 2
    settings.is_development = False
    settings.log_level = "INFO"
    settings.environment = "production"
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def test_help_lists_commands():
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    for command in ("serve", "init-db", "list-events", "export", "info"):
        assert command in result.output


def test_serve_uses_configured_workers():
    runner = CliRunner()

    with patch("donorbase.cli.get_settings", return_value=_mock_settings()), \
         patch("donorbase.cli.configure_logging"), \
         patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    mock_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["port"] == 9000
    assert kwargs["workers"] == 2
    assert kwargs["reload"] is False


def test_serve_reload_forces_single_worker():
    runner = CliRunner()

    with patch("donorbase.cli.get_settings", return_value=_mock_settings(is_development=True)), \
         patch("donorbase.cli.configure_logging"), \
         patch("uvicorn.run") as mock_run:
        result = runner.invoke(cli, ["serve", "--workers", "4"])

    assert result.exit_code == 0
    assert mock_run.call_args.kwargs["workers"] == 1
    assert mock_run.call_args.kwargs["reload"] is True


def test_info_shows_donation_settings():
    result = CliRunner().invoke(cli, ["info"])

    assert result.exit_code == 0
    assert "DonorBase v" in result.output
    assert "Currency:     INR" in result.output
