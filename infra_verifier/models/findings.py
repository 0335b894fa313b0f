# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Verification finding and report models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .enums import Severity


class Finding(BaseModel):
    """A single failed expectation."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "check": "vpc_cidr",
                "message": "VPC CIDR should match expected value",
                "severity": "error",
                "resource": "vpc-0abc1234",
            }
        }
    )

    check: str = Field(..., description="Short name of the check that failed")
    message: str = Field(..., description="Human-readable failure description")
    severity: Severity = Field(..., description="error (continued) or critical (aborted)")
    resource: str | None = Field(None, description="Resource the check was about")


class VerificationReport(BaseModel):
    """Outcome of one verification section."""

    section: str = Field(..., description="Name of the verification section")
    findings: list[Finding] = Field(default_factory=list)
    checks_run: int = Field(0, ge=0, description="Number of checks evaluated")
    aborted: bool = Field(False, description="Whether a requirement stopped the section")
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def passed(self) -> bool:
        return not self.findings

    @property
    def failures(self) -> list[str]:
        return [f.message if not f.resource else f"{f.message} ({f.resource})"
                for f in self.findings]

    def summary(self) -> str:
        """One block of text suitable for an assertion message."""
        status = "PASS" if self.passed else "FAIL"
        header = (
            f"[{status}] {self.section}: {self.checks_run} checks, "
            f"{len(self.findings)} failed"
        )
        if self.aborted:
            header += " (aborted)"
        return "\n".join([header, *[f"  - {line}" for line in self.failures]])
