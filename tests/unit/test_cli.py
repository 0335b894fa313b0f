"""Unit tests for the command-line entry point."""

from unittest.mock import MagicMock, patch

import pytest

from infra_verifier.__main__ import EXIT_DRIFT, EXIT_FAILED, EXIT_OK, build_parser, main
from infra_verifier.clients.terraform_client import TerraformError
from infra_verifier.models import ExpectedInfrastructure


@pytest.fixture
def container(sample_outputs):
    """A container whose clients are mocks."""
    mock = MagicMock()
    mock.expected = ExpectedInfrastructure()
    mock.terraform.output_all.return_value = sample_outputs
    with patch("infra_verifier.__main__.VerifierContainer", return_value=mock):
        yield mock


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_validate(container, capsys):
    assert main(["validate"]) == EXIT_OK
    container.terraform.init_and_validate.assert_called_once()
    assert "valid" in capsys.readouterr().out


def test_plan_prints_output(container, capsys):
    container.terraform.plan.return_value = "Plan: 1 to add, 0 to change, 0 to destroy."
    assert main(["plan"]) == EXIT_OK
    container.terraform.init.assert_called_once()
    assert "1 to add" in capsys.readouterr().out


@pytest.mark.parametrize(
    "plan,code",
    [
        ("No changes. Your infrastructure matches the configuration.", EXIT_OK),
        ("aws_sqs_queue.ingest will be updated in-place", EXIT_DRIFT),
        ("Refreshing state...", EXIT_OK),
    ],
)
def test_drift(container, plan, code):
    container.terraform.plan.return_value = plan
    assert main(["drift"]) == code


def test_drift_initializes_before_plan(container):
    container.terraform.plan.return_value = "No changes."

    assert main(["drift"]) == EXIT_OK
    called = [name for name, _, _ in container.terraform.method_calls]
    assert called == ["init", "plan"]


def test_outputs(container, capsys):
    assert main(["outputs"]) == EXIT_OK
    assert '"vpc_id": "vpc-0a1b2c3d4e5f67890"' in capsys.readouterr().out


def test_terraform_failure(container):
    container.terraform.init_and_validate.side_effect = TerraformError(
        "terraform validate failed with exit code 1", output="Error: x"
    )
    assert main(["validate"]) == EXIT_FAILED


def test_verify_reports_each_section(container, capsys):
    # Mocked AWS responses are empty, so live sections abort
    assert main(["verify"]) == EXIT_FAILED

    out = capsys.readouterr().out
    assert "[PASS] outputs" in out
    assert "[FAIL] network" in out
    assert "buckets" in out
    assert "kms" in out


def test_terraform_dir_override(container):
    with patch("infra_verifier.__main__.VerifierContainer") as factory:
        factory.return_value = container
        main(["--terraform-dir", "infra/env/qa", "validate"])

    settings = factory.call_args.kwargs["settings"]
    assert settings.terraform_dir == "infra/env/qa"
