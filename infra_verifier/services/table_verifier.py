# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Checks on the file-tracking DynamoDB table."""

import logging

from ..clients.aws_client import AWSClient
from ..models import ExpectedInfrastructure
from .verification import Verifier

logger = logging.getLogger(__name__)


def verify_table(
    verifier: Verifier,
    aws_client: AWSClient,
    table_name: str,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify status, billing, key schema, encryption and point-in-time recovery."""
    table = verifier.call(
        lambda: aws_client.describe_table(table_name),
        "DynamoDB table should exist",
        required=True,
        resource=table_name,
    )

    verifier.equal(
        expected.table_status, table.get("TableStatus"), "Table status should match"
    )

    # Billing
    billing = table.get("BillingModeSummary")
    verifier.not_none(billing, "Table should have billing mode summary", required=True)
    verifier.equal(
        expected.table_billing_mode,
        billing.get("BillingMode"),
        "Table billing mode should match",
    )

    # Key schema
    key_schema = table.get("KeySchema")
    verifier.not_none(key_schema, "Table should have key schema", required=True)
    verifier.length(key_schema, 1, "Table should have one key (hash key)", required=True)
    verifier.equal(
        expected.table_hash_key,
        key_schema[0].get("AttributeName"),
        "Hash key name should match",
    )
    verifier.equal("HASH", key_schema[0].get("KeyType"), "Key type should be HASH")

    definitions = table.get("AttributeDefinitions")
    verifier.not_none(definitions, "Table should have attribute definitions", required=True)
    found = False
    for definition in definitions:
        if definition.get("AttributeName") == expected.table_hash_key:
            found = True
            verifier.equal(
                expected.table_hash_key_type,
                definition.get("AttributeType"),
                f"{expected.table_hash_key} attribute type should match",
            )
    verifier.check(found, f"Table should have {expected.table_hash_key} attribute definition")

    # Encryption
    sse = table.get("SSEDescription")
    verifier.not_none(sse, "Table should have SSE description", required=True)
    verifier.equal("ENABLED", sse.get("Status"), "Table should have encryption enabled")
    verifier.not_none(sse.get("KMSMasterKeyArn"), "Table should use KMS encryption")

    # Point-in-time recovery
    backups = verifier.call(
        lambda: aws_client.continuous_backups(table_name),
        "Should be able to get continuous backups info",
        required=True,
        resource=table_name,
    )
    verifier.not_empty(
        backups, "Table should have continuous backups description", required=True
    )
    pitr = backups.get("PointInTimeRecoveryDescription")
    verifier.not_none(
        pitr, "Table should have point-in-time recovery description", required=True
    )
    verifier.equal(
        "ENABLED",
        pitr.get("PointInTimeRecoveryStatus"),
        "Point-in-time recovery should be enabled",
    )
    logger.info(f"Table {table_name} verified")
