# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Checks on Terraform output values."""

import logging

from ..models import CoreOutputs, ExpectedInfrastructure, MessagingOutputs
from .verification import Verifier

logger = logging.getLogger(__name__)

KMS_ARN_PREFIX = "arn:aws:kms:"
IAM_ARN_PREFIX = "arn:aws:iam:"
SQS_ARN_PREFIX = "arn:aws:sqs:"
DYNAMODB_ARN_PREFIX = "arn:aws:dynamodb:"


def verify_core_outputs(
    verifier: Verifier,
    outputs: CoreOutputs,
    expected: ExpectedInfrastructure,
) -> None:
    """
    Verify network, bucket, key, role and tag outputs.

    Raises:
        RequirementFailed: When a required output is missing or malformed
    """
    # VPC
    verifier.not_empty(outputs.vpc_id, "VPC ID should not be empty", required=True)
    verifier.starts_with(outputs.vpc_id, "vpc-", "VPC ID should start with 'vpc-'")

    verifier.not_empty(outputs.vpc_cidr, "VPC CIDR should not be empty", required=True)
    verifier.equal(expected.vpc_cidr, outputs.vpc_cidr, "VPC CIDR should match expected value")

    # Subnets
    verifier.length(
        outputs.public_subnet_ids,
        expected.public_subnet_count,
        f"Should have {expected.public_subnet_count} public subnets",
        required=True,
    )
    verifier.length(
        outputs.private_subnet_ids,
        expected.private_subnet_count,
        f"Should have {expected.private_subnet_count} private subnets",
        required=True,
    )
    for subnet_id in outputs.subnet_ids:
        verifier.starts_with(
            subnet_id, "subnet-", "Subnet ID should start with 'subnet-'", resource=subnet_id
        )

    # Buckets
    for key in expected.bucket_keys:
        verifier.contains(
            outputs.s3_bucket_names, key, f"Should have {key} bucket", required=True
        )
    for bucket_type, bucket_name in outputs.s3_bucket_names.items():
        verifier.starts_with(
            bucket_name,
            expected.resource_prefix,
            f"{bucket_type} bucket should start with '{expected.resource_prefix}'",
            resource=bucket_name,
        )

    # KMS keys
    for key in expected.kms_key_keys:
        verifier.contains(
            outputs.kms_key_arns, key, f"Should have {key} KMS key", required=True
        )
    for key_type, key_arn in outputs.kms_key_arns.items():
        verifier.starts_with(
            key_arn, KMS_ARN_PREFIX, f"{key_type} KMS key should be a valid ARN", resource=key_arn
        )

    # IAM roles
    for key in expected.iam_role_keys:
        verifier.contains(
            outputs.iam_role_arns, key, f"Should have {key} role", required=True
        )
    for role_type, role_arn in outputs.iam_role_arns.items():
        verifier.starts_with(
            role_arn, IAM_ARN_PREFIX, f"{role_type} role should be a valid ARN", resource=role_arn
        )

    # Tags
    for tag_key in expected.tags:
        verifier.contains(outputs.tags, tag_key, f"Should have {tag_key} tag", required=True)
    for tag_key, tag_value in expected.tags.items():
        verifier.equal(
            tag_value, outputs.tags.get(tag_key), f"{tag_key} tag should be '{tag_value}'"
        )


def verify_messaging_outputs(
    verifier: Verifier,
    outputs: MessagingOutputs,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify queue, table and notification bucket outputs."""
    verifier.not_empty(outputs.sqs_queue_arn, "SQS queue ARN should not be empty", required=True)
    verifier.starts_with(
        outputs.sqs_queue_arn, SQS_ARN_PREFIX, "SQS queue ARN should be a valid ARN"
    )

    verifier.not_empty(outputs.sqs_queue_url, "SQS queue URL should not be empty", required=True)
    verifier.check("sqs." in outputs.sqs_queue_url, "SQS queue URL should contain 'sqs.'")

    verifier.not_empty(outputs.sqs_dlq_arn, "SQS DLQ ARN should not be empty", required=True)
    verifier.starts_with(
        outputs.sqs_dlq_arn, SQS_ARN_PREFIX, "SQS DLQ ARN should be a valid ARN"
    )

    verifier.not_empty(
        outputs.dynamodb_table_arn, "DynamoDB table ARN should not be empty", required=True
    )
    verifier.starts_with(
        outputs.dynamodb_table_arn,
        DYNAMODB_ARN_PREFIX,
        "DynamoDB table ARN should be a valid ARN",
    )

    verifier.not_empty(
        outputs.dynamodb_table_name, "DynamoDB table name should not be empty", required=True
    )
    verifier.starts_with(
        outputs.dynamodb_table_name,
        expected.resource_prefix,
        f"DynamoDB table name should start with '{expected.resource_prefix}'",
    )

    verifier.contains(
        outputs.s3_bucket_names,
        expected.notification_bucket_key,
        f"Should have {expected.notification_bucket_key} bucket in outputs",
        required=True,
    )
    logger.info(f"Messaging outputs verified for table {outputs.dynamodb_table_name}")
