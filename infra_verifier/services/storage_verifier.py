# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Checks on S3 buckets and the KMS keys that encrypt them."""

import logging

from ..clients.aws_client import AWSClient
from ..models import ExpectedInfrastructure
from .verification import Verifier

logger = logging.getLogger(__name__)


def verify_bucket(
    verifier: Verifier,
    aws_client: AWSClient,
    bucket_type: str,
    bucket_name: str,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify a bucket exists, is versioned and uses KMS default encryption."""
    verifier.call(
        lambda: aws_client.head_bucket(bucket_name),
        f"{bucket_type} bucket should exist",
        resource=bucket_name,
    )

    # Versioning
    versioning = verifier.call(
        lambda: aws_client.bucket_versioning(bucket_name),
        f"Should be able to read {bucket_type} bucket versioning",
        required=True,
        resource=bucket_name,
    )
    verifier.not_none(
        versioning,
        f"{bucket_type} bucket should have versioning status",
        required=True,
        resource=bucket_name,
    )
    verifier.equal(
        expected.bucket_versioning_status,
        versioning,
        f"{bucket_type} bucket should have versioning enabled",
        resource=bucket_name,
    )

    # Encryption
    rules = verifier.call(
        lambda: aws_client.bucket_encryption(bucket_name),
        f"Should be able to read {bucket_type} bucket encryption",
        required=True,
        resource=bucket_name,
    )
    verifier.not_empty(
        rules,
        f"{bucket_type} bucket should have encryption configured",
        required=True,
        resource=bucket_name,
    )
    verifier.length(
        rules,
        1,
        f"{bucket_type} bucket should have encryption rule",
        required=True,
        resource=bucket_name,
    )

    default = rules[0].get("ApplyServerSideEncryptionByDefault")
    verifier.not_none(
        default,
        f"{bucket_type} bucket should have default encryption",
        required=True,
        resource=bucket_name,
    )
    verifier.equal(
        expected.bucket_sse_algorithm,
        default.get("SSEAlgorithm"),
        f"{bucket_type} bucket should use KMS encryption",
        resource=bucket_name,
    )


def verify_buckets(
    verifier: Verifier,
    aws_client: AWSClient,
    bucket_names: dict[str, str],
    expected: ExpectedInfrastructure,
) -> None:
    for bucket_type, bucket_name in bucket_names.items():
        verify_bucket(verifier, aws_client, bucket_type, bucket_name, expected)
    logger.info(f"Verified {len(bucket_names)} buckets")


def verify_kms_keys(
    verifier: Verifier,
    aws_client: AWSClient,
    key_arns: dict[str, str],
    expected: ExpectedInfrastructure,
) -> None:
    """Verify every key exists, is enabled and is a symmetric encryption key."""
    for key_type, key_arn in key_arns.items():
        metadata = verifier.call(
            lambda: aws_client.describe_key(key_arn),
            f"{key_type} KMS key should exist",
            required=True,
            resource=key_arn,
        )
        verifier.check(
            metadata.get("Enabled", False),
            f"{key_type} KMS key should be enabled",
            resource=key_arn,
        )
        verifier.equal(
            expected.kms_key_usage,
            metadata.get("KeyUsage"),
            f"{key_type} KMS key should be for encryption/decryption",
            resource=key_arn,
        )
    logger.info(f"Verified {len(key_arns)} KMS keys")
