"""Tests for the breachwatch command-line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from breachwatch import __version__
from breachwatch.cli import main
from breachwatch.hibp.models import (
    PasswordOutcome,
    QueryResult,
    ResultStatus,
    ValidationType,
)

API_BASE = "https://haveibeenpwned.com/api/v3"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_run_query():
    with patch("breachwatch.hibp.cli.run_query") as mock:
        yield mock


def make_result(vtype, status=ResultStatus.SUCCESS, data=None, message=None, outcome=None):
    return QueryResult(
        validation_type=vtype,
        url=f"{API_BASE}/test",
        status=status,
        data=data,
        message=message,
        password_outcome=outcome,
    )


def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_query_prints_json(runner, mock_run_query):
    breaches = [{"Name": "Adobe", "Domain": "adobe.com"}]
    mock_run_query.return_value = make_result(ValidationType.BREACHED_ACCOUNT, data=breaches)

    result = runner.invoke(main, [
        "hibp", "query",
        "--validation-type", "BreachedAccount",
        "--email-address", "test@example.com",
    ])

    assert result.exit_code == 0
    assert json.loads(result.output) == breaches
    params, config = mock_run_query.call_args.args
    assert params.validation_type is ValidationType.BREACHED_ACCOUNT
    assert params.email_address == "test@example.com"
    assert config.api_base == API_BASE


def test_query_validation_type_ignores_case(runner, mock_run_query):
    mock_run_query.return_value = make_result(ValidationType.DATA_CLASSES, data=["Passwords"])

    result = runner.invoke(main, ["hibp", "query", "--validation-type", "dataclasses"])

    assert result.exit_code == 0
    params, _ = mock_run_query.call_args.args
    assert params.validation_type is ValidationType.DATA_CLASSES


def test_query_json_flag_outputs_full_result(runner, mock_run_query):
    mock_run_query.return_value = make_result(ValidationType.DATA_CLASSES, data=["Passwords"])

    result = runner.invoke(main, ["hibp", "query", "-t", "DataClasses", "--json"])

    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["status"] == "success"
    assert output["data"] == ["Passwords"]


def test_invalid_email_makes_no_request(runner, mock_run_query):
    result = runner.invoke(main, [
        "hibp", "query",
        "--validation-type", "BreachedAccount",
        "--email-address", "not-an-email",
    ])

    assert result.exit_code == 2
    assert "Invalid email address" in result.output
    mock_run_query.assert_not_called()


def test_missing_site_name_makes_no_request(runner, mock_run_query):
    result = runner.invoke(main, ["hibp", "query", "--validation-type", "SingleBreachedSite"])

    assert result.exit_code == 2
    assert "site name is required" in result.output
    mock_run_query.assert_not_called()


def test_unknown_validation_type(runner, mock_run_query):
    result = runner.invoke(main, ["hibp", "query", "--validation-type", "Everything"])

    assert result.exit_code == 2
    mock_run_query.assert_not_called()


def test_not_found_is_a_warning(runner, mock_run_query):
    mock_run_query.return_value = make_result(
        ValidationType.SINGLE_BREACHED_SITE,
        status=ResultStatus.NOT_FOUND,
        message="Adobe was not found.",
    )

    result = runner.invoke(main, ["hibp", "breach", "Adobe"])

    assert result.exit_code == 0
    assert "Warning: Adobe was not found." in result.output


@pytest.mark.parametrize(
    "outcome, status, expected",
    [
        (PasswordOutcome.PWNED, ResultStatus.SUCCESS, "found in a data breach"),
        (PasswordOutcome.NOT_PWNED, ResultStatus.NOT_FOUND, "password was not found"),
        (PasswordOutcome.RATE_LIMITED, ResultStatus.ERROR, "Warning: Too many requests"),
    ],
)
def test_password_outcomes(runner, mock_run_query, outcome, status, expected):
    mock_run_query.return_value = make_result(
        ValidationType.PWNED_PASSWORDS,
        status=status,
        message=outcome.message,
        outcome=outcome,
    )

    result = runner.invoke(main, ["hibp", "password", "--password", "hunter2"])

    assert result.exit_code == 0
    assert expected in result.output


def test_password_prompts_when_missing(runner, mock_run_query):
    mock_run_query.return_value = make_result(
        ValidationType.PWNED_PASSWORDS,
        status=ResultStatus.NOT_FOUND,
        message=PasswordOutcome.NOT_PWNED.message,
        outcome=PasswordOutcome.NOT_PWNED,
    )

    result = runner.invoke(main, ["hibp", "password"], input="hunter2\n")

    assert result.exit_code == 0
    params, _ = mock_run_query.call_args.args
    assert params.password == "hunter2"


@pytest.mark.parametrize(
    "args, vtype, field, value",
    [
        (["account", "a@b.com"], ValidationType.BREACHED_ACCOUNT, "email_address", "a@b.com"),
        (["breaches", "--domain", "adobe.com"], ValidationType.ALL_BREACHED_SITES, "domain", "adobe.com"),
        (["breaches"], ValidationType.ALL_BREACHED_SITES, "domain", None),
        (["breach", "Adobe"], ValidationType.SINGLE_BREACHED_SITE, "site_name", "Adobe"),
        (["dataclasses"], ValidationType.DATA_CLASSES, "domain", None),
        (["pastes", "a@b.com"], ValidationType.ALL_PASTES, "email_address", "a@b.com"),
    ],
)
def test_shortcuts_dispatch_mode(runner, mock_run_query, args, vtype, field, value):
    mock_run_query.return_value = make_result(vtype, data=[])

    result = runner.invoke(main, ["hibp", *args])

    assert result.exit_code == 0
    params, _ = mock_run_query.call_args.args
    assert params.validation_type is vtype
    assert getattr(params, field) == value


def test_api_key_option_overrides_env(runner, mock_run_query, monkeypatch):
    monkeypatch.setenv("HIBP_API_KEY", "from-env")
    mock_run_query.return_value = make_result(ValidationType.DATA_CLASSES, data=[])

    result = runner.invoke(main, ["hibp", "--api-key", "from-flag", "dataclasses"])

    assert result.exit_code == 0
    _, config = mock_run_query.call_args.args
    assert config.api_key == "from-flag"


def test_insecure_api_base_rejected(runner, mock_run_query):
    result = runner.invoke(main, ["hibp", "--api-base", "http://insecure.test", "dataclasses"])

    assert result.exit_code == 2
    assert "must use https" in result.output
    mock_run_query.assert_not_called()


def test_config_command_masks_key(runner, monkeypatch):
    monkeypatch.setenv("HIBP_API_KEY", "0123456789abcdef")

    result = runner.invoke(main, ["hibp", "config"])

    assert result.exit_code == 0
    assert "01234567..." in result.output
    assert "0123456789abcdef" not in result.output
