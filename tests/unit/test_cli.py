"""Unit tests for the harvest command line."""

from pathlib import Path

import httpx
import pytest
from click.testing import CliRunner

from scopeharvest.cli import harvest
from scopeharvest.fetch.config import FetchConfig
from scopeharvest.fetch.metrics import FetchMetrics
from tests.helpers.api import make_requester, programs_body, scopes_body


def api_handler(request: httpx.Request) -> httpx.Response:
    """Serve one bounty program with one eligible asset."""
    if request.url.path.endswith("/structured_scopes"):
        return httpx.Response(200, content=scopes_body(("api.acme.com", True)))
    if request.url.params["page[number]"] == "1":
        return httpx.Response(200, content=programs_body(("acme", True)))
    return httpx.Response(200, content=programs_body())


@pytest.fixture(autouse=True)
def cli_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> list[httpx.Request]:
    """Isolate the CLI from the network, environment and global logging."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return api_handler(request)

    def fake_requester(config: FetchConfig, run_id: str = ""):
        return make_requester(handler)

    for name in (
        "HACKERONE_USERNAME",
        "HACKERONE_API_KEY",
        "SCOPEHARVEST_OUTPUT",
        "SCOPEHARVEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(harvest, "HttpRequester", fake_requester)
    monkeypatch.setattr(harvest, "configure_logging", lambda **kwargs: None)
    FetchMetrics.reset()
    return requests


def test_writes_assets_and_prints_total(tmp_path: Path) -> None:
    """A successful run appends assets and prints the program count."""
    output = tmp_path / "programs.txt"

    result = CliRunner().invoke(
        harvest.main,
        ["--username", "hunter", "--apikey", "s3cr3t", "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert "Total programs processed: 1" in result.output
    assert output.read_text() == "api.acme.com\n"


def test_appends_to_existing_file(tmp_path: Path) -> None:
    """Existing output is kept; new assets go after it."""
    output = tmp_path / "programs.txt"
    output.write_text("old.example\n")

    result = CliRunner().invoke(
        harvest.main,
        ["--username", "hunter", "--apikey", "s3cr3t", "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    assert output.read_text() == "old.example\napi.acme.com\n"


def test_default_output_in_working_directory(tmp_path: Path) -> None:
    """Without --output the assets go to programs.txt."""
    result = CliRunner().invoke(
        harvest.main, ["--username", "hunter", "--apikey", "s3cr3t"]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "programs.txt").read_text() == "api.acme.com\n"


def test_credentials_from_environment(
    monkeypatch: pytest.MonkeyPatch, cli_env: list[httpx.Request]
) -> None:
    """Environment variables stand in for missing flags."""
    monkeypatch.setenv("HACKERONE_USERNAME", "hunter")
    monkeypatch.setenv("HACKERONE_API_KEY", "s3cr3t\n")

    result = CliRunner().invoke(harvest.main, [])

    assert result.exit_code == 0, result.output
    # Basic aHVudGVyOnMzY3IzdA== is base64("hunter:s3cr3t")
    assert cli_env[0].headers["Authorization"] == "Basic aHVudGVyOnMzY3IzdA=="


def test_missing_apikey(cli_env: list[httpx.Request]) -> None:
    """The API key is mandatory."""
    result = CliRunner().invoke(harvest.main, ["--username", "hunter"])

    assert result.exit_code == 1
    assert "--apikey is required" in result.output
    assert cli_env == []


def test_missing_username_for_hackerone(cli_env: list[httpx.Request]) -> None:
    """HackerOne needs a username."""
    result = CliRunner().invoke(harvest.main, ["--apikey", "s3cr3t"])

    assert result.exit_code == 1
    assert "--username is required" in result.output
    assert cli_env == []


def test_whitespace_only_apikey() -> None:
    """A key made only of whitespace is rejected before any request."""
    result = CliRunner().invoke(
        harvest.main, ["--username", "hunter", "--apikey", "  \n"]
    )

    assert result.exit_code == 1
    assert "empty after removing whitespace" in result.output


def test_unsupported_platform_fails(tmp_path: Path) -> None:
    """Selecting a placeholder platform ends with a not-implemented error."""
    result = CliRunner().invoke(
        harvest.main, ["--program", "bugcrowd", "--apikey", "s3cr3t"]
    )

    assert result.exit_code == 1
    assert "fetcher for Bugcrowd not implemented yet" in result.output
    assert "Total programs processed" not in result.output


def test_api_error_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    """A fatal API error is reported and the exit status is 1."""
    monkeypatch.setattr(
        harvest,
        "HttpRequester",
        lambda config, run_id="": make_requester(lambda r: httpx.Response(401)),
    )

    result = CliRunner().invoke(
        harvest.main, ["--username", "hunter", "--apikey", "wrong"]
    )

    assert result.exit_code == 1
    assert "ERROR: programs page 1 request failed" in result.output
    assert "401" in result.output
