# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Expected configuration of a deployed environment."""

from pydantic import BaseModel, ConfigDict, Field


class ExpectedInfrastructure(BaseModel):
    """
    Every value the verification suites compare live state against.

    Defaults describe the dev environment of the claim management system.
    """

    model_config = ConfigDict(extra="forbid")

    # Network
    vpc_cidr: str = Field("10.10.0.0/16", description="CIDR block of the VPC")
    public_subnet_count: int = Field(2, ge=0)
    private_subnet_count: int = Field(2, ge=0)
    dns_hostnames_enabled: bool = Field(True)
    dns_support_enabled: bool = Field(True)

    # Naming
    resource_prefix: str = Field(
        "claim-dev-", description="Prefix of bucket and table names"
    )

    # Storage and encryption
    bucket_keys: list[str] = Field(default_factory=lambda: ["raw", "lake", "audit"])
    kms_key_keys: list[str] = Field(default_factory=lambda: ["raw", "lake", "audit"])
    bucket_versioning_status: str = Field("Enabled")
    bucket_sse_algorithm: str = Field("aws:kms")
    kms_key_usage: str = Field("ENCRYPT_DECRYPT")

    # Identity
    iam_role_keys: list[str] = Field(
        default_factory=lambda: ["ingestion", "etl", "analyst"]
    )

    # Tags
    tags: dict[str, str] = Field(
        default_factory=lambda: {
            "Environment": "dev",
            "Project": "claim-management-system",
            "ManagedBy": "terraform",
        }
    )

    # Queueing
    queue_retention_seconds: int = Field(345600, description="4 days")
    queue_visibility_timeout: int = Field(30)
    dlq_retention_seconds: int = Field(1209600, description="14 days")
    queue_policy_principal: str = Field("s3.amazonaws.com")
    queue_policy_action: str = Field("SendMessage")

    # Key-value table
    table_status: str = Field("ACTIVE")
    table_billing_mode: str = Field("PAY_PER_REQUEST")
    table_hash_key: str = Field("file_id")
    table_hash_key_type: str = Field("S")

    # Notification wiring
    notification_bucket_key: str = Field(
        "raw", description="Bucket map key of the bucket that notifies the queue"
    )
    notification_event_fragment: str = Field("ObjectCreated")
    event_test_key: str = Field("test/event-notification-test.txt")
    event_test_body: str = Field(
        "This is a test file to verify S3 event notification to SQS"
    )
