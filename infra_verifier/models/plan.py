"""Plan analysis models."""

from pydantic import BaseModel, Field

from .enums import DriftStatus


class PlanChangeSummary(BaseModel):
    """Counts from the 'Plan: X to add, Y to change, Z to destroy.' line."""

    to_add: int = Field(0, ge=0)
    to_change: int = Field(0, ge=0)
    to_destroy: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.to_add + self.to_change + self.to_destroy


class PlanAnalysis(BaseModel):
    """Classification of a plan's text output."""

    has_destructive_changes: bool = Field(
        False, description="Plan mentions destroy or forced replacement"
    )
    drift_status: DriftStatus = Field(DriftStatus.UNCLEAR)
    markers: list[str] = Field(
        default_factory=list, description="Phrases that drove the classification"
    )
    changes: PlanChangeSummary | None = Field(None)
    plan_output: str = Field("", description="Raw plan text")
