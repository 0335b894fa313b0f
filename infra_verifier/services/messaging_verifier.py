# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Checks on the ingestion queue, its dead-letter queue and the bucket
notification that feeds it."""

import logging

from ..clients.aws_client import AWSAPIError, AWSClient
from ..models import ExpectedInfrastructure
from .verification import Verifier

logger = logging.getLogger(__name__)

MESSAGE_COUNT_ATTRIBUTES = (
    "ApproximateNumberOfMessages",
    "ApproximateNumberOfMessagesNotVisible",
)


def verify_queue(
    verifier: Verifier,
    aws_client: AWSClient,
    queue_url: str,
    dlq_arn: str,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify encryption, redrive, retention, visibility and policy of the main queue."""
    attrs = verifier.call(
        lambda: aws_client.queue_attributes(queue_url),
        "Should be able to get queue attributes",
        required=True,
        resource=queue_url,
    )

    verifier.contains(
        attrs, "KmsMasterKeyId", "Queue should have KMS encryption configured", required=True
    )
    verifier.not_empty(attrs["KmsMasterKeyId"], "KMS key ID should not be empty")

    verifier.contains(
        attrs, "RedrivePolicy", "Queue should have redrive policy configured", required=True
    )
    verifier.contains(
        attrs["RedrivePolicy"], dlq_arn, "Redrive policy should reference the DLQ ARN"
    )

    verifier.contains(
        attrs,
        "MessageRetentionPeriod",
        "Queue should have message retention configured",
        required=True,
    )
    verifier.equal(
        str(expected.queue_retention_seconds),
        attrs["MessageRetentionPeriod"],
        "Message retention should match",
    )

    verifier.contains(
        attrs, "VisibilityTimeout", "Queue should have visibility timeout configured", required=True
    )
    verifier.equal(
        str(expected.queue_visibility_timeout),
        attrs["VisibilityTimeout"],
        "Visibility timeout should match",
    )

    verifier.contains(attrs, "Policy", "Queue should have a policy", required=True)
    verifier.contains(
        attrs["Policy"],
        expected.queue_policy_principal,
        f"Queue policy should allow {expected.queue_policy_principal}",
    )
    verifier.contains(
        attrs["Policy"],
        expected.queue_policy_action,
        f"Queue policy should allow {expected.queue_policy_action} action",
    )


def verify_dlq(
    verifier: Verifier,
    aws_client: AWSClient,
    dlq_url: str | None,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify the dead-letter queue is encrypted and keeps messages longer."""
    verifier.not_empty(dlq_url, "SQS DLQ URL output should be present", required=True)
    attrs = verifier.call(
        lambda: aws_client.queue_attributes(dlq_url),
        "Should be able to get DLQ attributes",
        required=True,
        resource=dlq_url,
    )

    verifier.contains(
        attrs, "KmsMasterKeyId", "DLQ should have KMS encryption configured", required=True
    )
    verifier.not_empty(attrs["KmsMasterKeyId"], "DLQ KMS key ID should not be empty")

    verifier.contains(
        attrs,
        "MessageRetentionPeriod",
        "DLQ should have message retention configured",
        required=True,
    )
    verifier.equal(
        str(expected.dlq_retention_seconds),
        attrs["MessageRetentionPeriod"],
        "DLQ message retention should match",
    )


def verify_bucket_notification(
    verifier: Verifier,
    aws_client: AWSClient,
    bucket_name: str,
    queue_arn: str,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify the bucket sends object-created events to the queue."""
    verifier.not_empty(bucket_name, "Notification bucket name should not be empty", required=True)

    config = verifier.call(
        lambda: aws_client.bucket_notification(bucket_name),
        "Should be able to get bucket notification configuration",
        required=True,
        resource=bucket_name,
    )

    queue_configs = config.get("QueueConfigurations")
    verifier.not_none(
        queue_configs,
        "Bucket should have queue notification configuration",
        required=True,
        resource=bucket_name,
    )
    verifier.length(
        queue_configs,
        1,
        "Bucket should have one queue notification",
        required=True,
        resource=bucket_name,
    )

    queue_config = queue_configs[0]
    verifier.equal(
        queue_arn,
        queue_config.get("QueueArn"),
        "Queue ARN in notification should match SQS queue ARN",
    )

    events = queue_config.get("Events")
    verifier.not_empty(events, "Queue config should have events", required=True)
    fragment = expected.notification_event_fragment
    verifier.check(
        any(fragment in event for event in events),
        f"Queue notification should include {fragment} events",
    )


def exercise_event_flow(
    verifier: Verifier,
    aws_client: AWSClient,
    bucket_name: str,
    queue_url: str,
    expected: ExpectedInfrastructure,
) -> dict[str, str] | None:
    """
    Upload a test object and confirm the queue is readable.

    The object is always deleted afterwards. Event delivery is
    asynchronous, so message counts are returned and logged rather than
    asserted.

    Returns:
        Message count attributes, or None when they could not be read
    """
    verifier.call(
        lambda: aws_client.put_object(bucket_name, expected.event_test_key, expected.event_test_body),
        "Should be able to upload test file to S3",
        required=True,
        resource=bucket_name,
    )

    try:
        counts = verifier.call(
            lambda: aws_client.queue_attributes(queue_url, MESSAGE_COUNT_ATTRIBUTES),
            "Should be able to get queue message count",
            required=True,
            resource=queue_url,
        )
    finally:
        try:
            aws_client.delete_object(bucket_name, expected.event_test_key)
        except AWSAPIError as e:
            logger.warning(
                f"Failed to delete test object {expected.event_test_key} "
                f"from {bucket_name}: {e}"
            )

    logger.info(
        f"Queue message attributes retrieved: {counts}. "
        "Event propagation may take a few seconds."
    )
    return counts
