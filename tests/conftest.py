"""Pytest configuration and shared fixtures."""

import subprocess

import pytest
from moto import mock_aws

from infra_verifier.clients.aws_client import AWSClient
from infra_verifier.models import ExpectedInfrastructure
from infra_verifier.services.verification import Verifier


# =============================================================================
# Environment and Configuration Fixtures
# =============================================================================

@pytest.fixture
def aws_credentials(monkeypatch):
    """Point boto3 at fake credentials so nothing can reach a real account."""
    test_vars = {
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "AWS_SECURITY_TOKEN": "testing",
        "AWS_SESSION_TOKEN": "testing",
        "AWS_DEFAULT_REGION": "us-east-1",
        "AWS_REGION": "us-east-1",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


@pytest.fixture
def test_env(monkeypatch, tmp_path):
    """Set up verifier environment variables."""
    test_vars = {
        "TERRAFORM_DIR": str(tmp_path / "infra" / "env" / "dev"),
        "TERRAFORM_BINARY": "terraform",
        "AWS_REGION": "us-east-1",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in test_vars.items():
        monkeypatch.setenv(key, value)
    return test_vars


# =============================================================================
# AWS Fixtures
# =============================================================================

@pytest.fixture
def aws(aws_credentials):
    """An AWSClient backed by moto for the duration of one test."""
    with mock_aws():
        yield AWSClient(region="us-east-1", min_call_interval=0.0)


@pytest.fixture
def expected():
    """Dev environment expectations."""
    return ExpectedInfrastructure()


@pytest.fixture
def verifier():
    return Verifier("test")


# =============================================================================
# Terraform Fixtures
# =============================================================================

@pytest.fixture
def completed_process():
    """Factory for subprocess.CompletedProcess results."""
    def _make(returncode: int = 0, stdout: str = "", stderr: str = ""):
        return subprocess.CompletedProcess(
            args=["terraform"], returncode=returncode, stdout=stdout, stderr=stderr
        )
    return _make


@pytest.fixture
def sample_outputs():
    """Decoded values of `terraform output -json` for a healthy dev deployment."""
    return {
        "vpc_id": "vpc-0a1b2c3d4e5f67890",
        "vpc_cidr": "10.10.0.0/16",
        "public_subnet_ids": ["subnet-0aaa000000000001", "subnet-0aaa000000000002"],
        "private_subnet_ids": ["subnet-0bbb000000000001", "subnet-0bbb000000000002"],
        "s3_bucket_names": {
            "raw": "claim-dev-raw-123456789012",
            "lake": "claim-dev-lake-123456789012",
            "audit": "claim-dev-audit-123456789012",
        },
        "kms_key_arns": {
            "raw": "arn:aws:kms:us-east-1:123456789012:key/11111111-1111-1111-1111-111111111111",
            "lake": "arn:aws:kms:us-east-1:123456789012:key/22222222-2222-2222-2222-222222222222",
            "audit": "arn:aws:kms:us-east-1:123456789012:key/33333333-3333-3333-3333-333333333333",
        },
        "iam_role_arns": {
            "ingestion": "arn:aws:iam::123456789012:role/claim-dev-ingestion",
            "etl": "arn:aws:iam::123456789012:role/claim-dev-etl",
            "analyst": "arn:aws:iam::123456789012:role/claim-dev-analyst",
        },
        "tags": {
            "Environment": "dev",
            "Project": "claim-management-system",
            "ManagedBy": "terraform",
        },
        "sqs_queue_arn": "arn:aws:sqs:us-east-1:123456789012:claim-dev-ingest",
        "sqs_queue_url": "https://sqs.us-east-1.amazonaws.com/123456789012/claim-dev-ingest",
        "sqs_dlq_arn": "arn:aws:sqs:us-east-1:123456789012:claim-dev-ingest-dlq",
        "sqs_dlq_url": "https://sqs.us-east-1.amazonaws.com/123456789012/claim-dev-ingest-dlq",
        "dynamodb_table_arn": "arn:aws:dynamodb:us-east-1:123456789012:table/claim-dev-files",
        "dynamodb_table_name": "claim-dev-files",
    }


# =============================================================================
# Pytest Hooks for Test Reporting
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "live: provisions real infrastructure (needs INFRA_LIVE_TESTS=1)"
    )
    config.addinivalue_line(
        "markers", "parallel_safe: shares no state and may run under pytest-xdist"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark tests by directory
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "property" in str(item.fspath):
            item.add_marker(pytest.mark.property)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
