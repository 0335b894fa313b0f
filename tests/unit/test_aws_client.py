"""Unit tests for AWS client wrapper."""

from unittest.mock import MagicMock, patch

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from infra_verifier.clients import AWSClient
from infra_verifier.clients.aws_client import AWSAPIError


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


# =============================================================================
# Backoff Tests
# =============================================================================

class TestCallWithBackoff:
    """Tests for retry and error conversion."""

    def test_retries_throttling(self, aws):
        func = MagicMock(side_effect=[_client_error("Throttling"), {"ok": True}])
        with patch("infra_verifier.clients.aws_client.time.sleep") as sleep:
            result = aws._call_with_backoff("ec2", func)

        assert result == {"ok": True}
        assert func.call_count == 2
        sleep.assert_called_once_with(1.0)

    def test_gives_up_after_max_retries(self, aws):
        func = MagicMock(side_effect=_client_error("ThrottlingException"))
        with patch("infra_verifier.clients.aws_client.time.sleep"):
            with pytest.raises(AWSAPIError) as exc_info:
                aws._call_with_backoff("sqs", func)

        assert func.call_count == 5
        assert exc_info.value.error_code == "ThrottlingException"

    def test_other_errors_not_retried(self, aws):
        func = MagicMock(side_effect=_client_error("AccessDenied"))
        with pytest.raises(AWSAPIError, match="AccessDenied"):
            aws._call_with_backoff("s3", func)
        assert func.call_count == 1

    def test_botocore_errors_converted(self, aws):
        func = MagicMock(side_effect=EndpointConnectionError(endpoint_url="https://x"))
        with pytest.raises(AWSAPIError, match="Boto3 error"):
            aws._call_with_backoff("kms", func)


# =============================================================================
# EC2 Tests
# =============================================================================

def test_describe_vpcs(aws):
    ec2 = boto3.client("ec2", region_name="us-east-1")
    vpc_id = ec2.create_vpc(CidrBlock="10.10.0.0/16")["Vpc"]["VpcId"]

    vpcs = aws.describe_vpcs([vpc_id])

    assert len(vpcs) == 1
    assert vpcs[0]["CidrBlock"] == "10.10.0.0/16"


def test_vpc_attribute(aws):
    ec2 = boto3.client("ec2", region_name="us-east-1")
    vpc_id = ec2.create_vpc(CidrBlock="10.10.0.0/16")["Vpc"]["VpcId"]
    ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsHostnames={"Value": True})

    assert aws.vpc_attribute(vpc_id, "enableDnsHostnames") is True
    assert aws.vpc_attribute(vpc_id, "enableDnsSupport") is True


def test_describe_unknown_vpc(aws):
    with pytest.raises(AWSAPIError) as exc_info:
        aws.describe_vpcs(["vpc-00000000000000000"])
    assert "NotFound" in exc_info.value.error_code


# =============================================================================
# S3 Tests
# =============================================================================

def test_bucket_versioning_unset(aws):
    boto3.client("s3", region_name="us-east-1").create_bucket(Bucket="claim-dev-raw")
    assert aws.bucket_versioning("claim-dev-raw") is None


def test_bucket_notification_strips_metadata(aws):
    boto3.client("s3", region_name="us-east-1").create_bucket(Bucket="claim-dev-raw")
    assert "ResponseMetadata" not in aws.bucket_notification("claim-dev-raw")


def test_put_and_delete_object(aws):
    s3 = boto3.client("s3", region_name="us-east-1")
    s3.create_bucket(Bucket="claim-dev-raw")

    aws.put_object("claim-dev-raw", "test/a.txt", "hello")
    body = s3.get_object(Bucket="claim-dev-raw", Key="test/a.txt")["Body"].read()
    assert body == b"hello"

    aws.delete_object("claim-dev-raw", "test/a.txt")
    assert s3.list_objects_v2(Bucket="claim-dev-raw")["KeyCount"] == 0


def test_head_missing_bucket(aws):
    with pytest.raises(AWSAPIError):
        aws.head_bucket("claim-dev-missing")


def test_bucket_encryption_missing_configuration(aws):
    """A bucket without an encryption configuration yields no rules."""
    aws.s3 = MagicMock()
    aws.s3.get_bucket_encryption.side_effect = _client_error(
        "ServerSideEncryptionConfigurationNotFoundError"
    )
    assert aws.bucket_encryption("claim-dev-raw") == []


def test_bucket_encryption_other_error_raises(aws):
    aws.s3 = MagicMock()
    aws.s3.get_bucket_encryption.side_effect = _client_error("AccessDenied")
    with pytest.raises(AWSAPIError):
        aws.bucket_encryption("claim-dev-raw")


# =============================================================================
# SQS / KMS / DynamoDB Tests
# =============================================================================

def test_queue_attributes_subset(aws):
    sqs = boto3.client("sqs", region_name="us-east-1")
    url = sqs.create_queue(QueueName="q", Attributes={"VisibilityTimeout": "30"})["QueueUrl"]

    attrs = aws.queue_attributes(url, ["VisibilityTimeout"])

    assert attrs == {"VisibilityTimeout": "30"}


def test_describe_key(aws):
    kms = boto3.client("kms", region_name="us-east-1")
    arn = kms.create_key()["KeyMetadata"]["Arn"]

    metadata = aws.describe_key(arn)

    assert metadata["Arn"] == arn
    assert metadata["Enabled"] is True


def test_describe_table_and_backups(aws):
    dynamodb = boto3.client("dynamodb", region_name="us-east-1")
    dynamodb.create_table(
        TableName="t",
        KeySchema=[{"AttributeName": "file_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "file_id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )

    assert aws.describe_table("t")["TableName"] == "t"
    assert "PointInTimeRecoveryDescription" in aws.continuous_backups("t")
