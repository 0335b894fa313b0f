"""Verification services."""

from .verification import Verifier, RequirementFailed
from .expectation_service import (
    ExpectationService,
    ExpectationsNotFoundError,
    ExpectationsValidationError,
)
from .plan_analyzer import analyze_plan, classify_drift, find_destructive_changes
from .output_verifier import verify_core_outputs, verify_messaging_outputs
from .network_verifier import verify_network, verify_subnets, verify_vpc
from .storage_verifier import verify_bucket, verify_buckets, verify_kms_keys
from .messaging_verifier import (
    exercise_event_flow,
    verify_bucket_notification,
    verify_dlq,
    verify_queue,
)
from .table_verifier import verify_table

__all__ = [
    "Verifier",
    "RequirementFailed",
    "ExpectationService",
    "ExpectationsNotFoundError",
    "ExpectationsValidationError",
    "analyze_plan",
    "classify_drift",
    "find_destructive_changes",
    "verify_core_outputs",
    "verify_messaging_outputs",
    "verify_network",
    "verify_subnets",
    "verify_vpc",
    "verify_bucket",
    "verify_buckets",
    "verify_kms_keys",
    "exercise_event_flow",
    "verify_bucket_notification",
    "verify_dlq",
    "verify_queue",
    "verify_table",
]
