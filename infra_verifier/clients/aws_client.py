"""AWS client wrapper with rate limiting and backoff."""

import logging
import time
from typing import Any, Callable, Iterable

import boto3
from botocore.exceptions import ClientError, BotoCoreError
from botocore.config import Config

logger = logging.getLogger(__name__)

THROTTLING_ERROR_CODES = {"Throttling", "ThrottlingException", "RequestLimitExceeded"}


class AWSAPIError(Exception):
    """Raised when AWS API calls fail."""

    def __init__(self, message: str, error_code: str = ""):
        super().__init__(message)
        self.error_code = error_code


class AWSClient:
    """
    Wrapper around the boto3 clients the verification suites read from.

    Credentials come from the default provider chain - no hardcoded keys.
    Throttled calls are retried with exponential backoff; every other
    failure surfaces as AWSAPIError.
    """

    def __init__(self, region: str = "us-east-1", min_call_interval: float = 0.1):
        """
        Initialize AWS clients.

        Args:
            region: AWS region the environment is deployed to
            min_call_interval: Minimum seconds between calls to the same service
        """
        # Configure boto3 with retries
        config = Config(
            region_name=region,
            retries={
                'max_attempts': 3,
                'mode': 'adaptive'
            }
        )

        self.region = region
        self.ec2 = boto3.client('ec2', config=config)
        self.s3 = boto3.client('s3', config=config)
        self.kms = boto3.client('kms', config=config)
        self.sqs = boto3.client('sqs', config=config)
        self.dynamodb = boto3.client('dynamodb', config=config)

        # Rate limiting state
        self._last_call_time: dict[str, float] = {}
        self._min_call_interval = min_call_interval

    def _rate_limit(self, service_name: str) -> None:
        """Sleep if the previous call to this service was too recent."""
        if service_name in self._last_call_time:
            elapsed = time.time() - self._last_call_time[service_name]
            if elapsed < self._min_call_interval:
                time.sleep(self._min_call_interval - elapsed)

        self._last_call_time[service_name] = time.time()

    def _call_with_backoff(
        self,
        service_name: str,
        func: Callable[..., Any],
        *args,
        **kwargs
    ) -> Any:
        """
        Call AWS API with exponential backoff on rate limit errors.

        Args:
            service_name: Name of the AWS service
            func: Boto3 client method to call
            *args: Positional arguments for the method
            **kwargs: Keyword arguments for the method

        Returns:
            Response from AWS API

        Raises:
            AWSAPIError: If the API call fails after retries
        """
        self._rate_limit(service_name)

        max_retries = 5
        base_delay = 1.0

        for attempt in range(max_retries):
            try:
                return func(*args, **kwargs)

            except ClientError as e:
                error_code = e.response.get('Error', {}).get('Code', '')

                # Retry on throttling errors
                if error_code in THROTTLING_ERROR_CODES and attempt < max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"{service_name} throttled ({error_code}), retrying in {delay:.1f}s"
                    )
                    time.sleep(delay)
                    continue

                raise AWSAPIError(
                    f"AWS API error: {error_code} - {str(e)}", error_code=error_code
                ) from e

            except BotoCoreError as e:
                raise AWSAPIError(f"Boto3 error: {str(e)}") from e

        raise AWSAPIError(f"Max retries exceeded for {service_name}")

    # =========================================================================
    # EC2
    # =========================================================================

    def describe_vpcs(self, vpc_ids: list[str]) -> list[dict[str, Any]]:
        response = self._call_with_backoff(
            "ec2", self.ec2.describe_vpcs, VpcIds=list(vpc_ids)
        )
        return response.get("Vpcs", [])

    def vpc_attribute(self, vpc_id: str, attribute: str) -> bool:
        """
        Read a boolean VPC attribute.

        Args:
            vpc_id: VPC identifier
            attribute: enableDnsHostnames or enableDnsSupport

        Returns:
            The attribute value (False when AWS omits it)
        """
        response = self._call_with_backoff(
            "ec2", self.ec2.describe_vpc_attribute, VpcId=vpc_id, Attribute=attribute
        )
        # Response key is the attribute name with a leading capital
        key = attribute[0].upper() + attribute[1:]
        return bool(response.get(key, {}).get("Value", False))

    def describe_subnets(self, subnet_ids: list[str]) -> list[dict[str, Any]]:
        response = self._call_with_backoff(
            "ec2", self.ec2.describe_subnets, SubnetIds=list(subnet_ids)
        )
        return response.get("Subnets", [])

    # =========================================================================
    # S3
    # =========================================================================

    def head_bucket(self, bucket: str) -> None:
        self._call_with_backoff("s3", self.s3.head_bucket, Bucket=bucket)

    def bucket_versioning(self, bucket: str) -> str | None:
        """Return the versioning status, or None if versioning was never configured."""
        response = self._call_with_backoff(
            "s3", self.s3.get_bucket_versioning, Bucket=bucket
        )
        return response.get("Status")

    def bucket_encryption(self, bucket: str) -> list[dict[str, Any]]:
        """
        Return the default encryption rules of a bucket.

        Returns:
            List of rules; empty when no encryption configuration exists
        """
        try:
            response = self._call_with_backoff(
                "s3", self.s3.get_bucket_encryption, Bucket=bucket
            )
        except AWSAPIError as e:
            if e.error_code == "ServerSideEncryptionConfigurationNotFoundError":
                return []
            raise

        config = response.get("ServerSideEncryptionConfiguration", {})
        return config.get("Rules", [])

    def bucket_notification(self, bucket: str) -> dict[str, Any]:
        response = self._call_with_backoff(
            "s3", self.s3.get_bucket_notification_configuration, Bucket=bucket
        )
        return {k: v for k, v in response.items() if k != "ResponseMetadata"}

    def put_object(self, bucket: str, key: str, body: str) -> None:
        self._call_with_backoff(
            "s3", self.s3.put_object, Bucket=bucket, Key=key, Body=body.encode("utf-8")
        )

    def delete_object(self, bucket: str, key: str) -> None:
        self._call_with_backoff("s3", self.s3.delete_object, Bucket=bucket, Key=key)

    # =========================================================================
    # KMS
    # =========================================================================

    def describe_key(self, key_id: str) -> dict[str, Any]:
        response = self._call_with_backoff("kms", self.kms.describe_key, KeyId=key_id)
        return response.get("KeyMetadata", {})

    # =========================================================================
    # SQS
    # =========================================================================

    def queue_attributes(
        self, queue_url: str, names: Iterable[str] = ("All",)
    ) -> dict[str, str]:
        response = self._call_with_backoff(
            "sqs",
            self.sqs.get_queue_attributes,
            QueueUrl=queue_url,
            AttributeNames=list(names),
        )
        return response.get("Attributes", {})

    # =========================================================================
    # DynamoDB
    # =========================================================================

    def describe_table(self, table_name: str) -> dict[str, Any]:
        response = self._call_with_backoff(
            "dynamodb", self.dynamodb.describe_table, TableName=table_name
        )
        return response.get("Table", {})

    def continuous_backups(self, table_name: str) -> dict[str, Any]:
        response = self._call_with_backoff(
            "dynamodb", self.dynamodb.describe_continuous_backups, TableName=table_name
        )
        return response.get("ContinuousBackupsDescription", {})
