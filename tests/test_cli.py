from typer.testing import CliRunner
from ratelimiter import cli

runner = CliRunner()

def test_check_reports_denials():
    result = runner.invoke(cli.app, ["check", "c1", "--count", "3", "--capacity", "2", "--rate", "1"])
    assert result.exit_code == 0
    assert result.output.count("ALLOWED") == 2
    assert result.output.count("DENIED") == 1
    assert "remaining=0" in result.output

def test_simulate_runs(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)
    monkeypatch.setenv("RATELIMIT_SIM_MAX_JITTER_MS", "0")
    result = runner.invoke(cli.app, ["simulate", "--capacity", "4", "--rate", "1", "--burst", "6", "--followup", "0", "--pause", "0"])
    assert result.exit_code == 0, result.output
    assert "allowed=4 denied=2 total=6" in result.output

def test_simulate_rejects_non_positive_counts():
    for args in (["--burst", "0"], ["--workers", "0"], ["--workers", "-2"], ["--followup", "-1"]):
        result = runner.invoke(cli.app, ["simulate", *args])
        assert result.exit_code == 2, args
