"""Data models for the claim infrastructure verifier."""

from .enums import Severity, DriftStatus
from .findings import Finding, VerificationReport
from .expectations import ExpectedInfrastructure
from .plan import PlanAnalysis, PlanChangeSummary
from .outputs import CoreOutputs, MessagingOutputs

__all__ = [
    "Severity",
    "DriftStatus",
    "Finding",
    "VerificationReport",
    "ExpectedInfrastructure",
    "PlanAnalysis",
    "PlanChangeSummary",
    "CoreOutputs",
    "MessagingOutputs",
]
