# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Classification of Terraform plan output."""

import logging
import re

from ..models import DriftStatus, PlanAnalysis, PlanChangeSummary

logger = logging.getLogger(__name__)

NO_CHANGE_MARKERS = (
    "No changes",
    "Your infrastructure matches the configuration",
)
CHANGE_MARKERS = (
    "will be created",
    "will be updated",
    "will be destroyed",
)
DESTRUCTIVE_MARKERS = (
    "destroy",
    "forces replacement",
)

_SUMMARY_RE = re.compile(
    r"Plan:\s*(?:\d+\s+to import,\s*)?(\d+)\s+to add,\s*(\d+)\s+to change,\s*(\d+)\s+to destroy"
)


def summarize_plan_changes(plan_output: str) -> PlanChangeSummary | None:
    """
    Parse the change counts from a plan.

    Returns:
        PlanChangeSummary, or None when the plan has no summary line
    """
    match = _SUMMARY_RE.search(plan_output)
    if not match:
        return None
    to_add, to_change, to_destroy = (int(g) for g in match.groups())
    return PlanChangeSummary(to_add=to_add, to_change=to_change, to_destroy=to_destroy)


def find_destructive_changes(plan_output: str) -> list[str]:
    """
    Find phrases indicating that a plan destroys or replaces resources.

    The summary line is judged by its count: "0 to destroy" is not destructive.

    Returns:
        Matched markers (empty when the plan is non-destructive)
    """
    summary = summarize_plan_changes(plan_output)
    body = _SUMMARY_RE.sub("", plan_output)

    found = [marker for marker in DESTRUCTIVE_MARKERS if marker in body]
    if summary and summary.to_destroy > 0 and "destroy" not in found:
        found.insert(0, "destroy")
    return found


def classify_drift(plan_output: str) -> tuple[DriftStatus, list[str]]:
    """
    Classify a post-apply plan.

    No-change markers win over change markers; a plan matching neither
    needs manual review.

    Returns:
        Drift status and the markers that decided it
    """
    no_change = [m for m in NO_CHANGE_MARKERS if m in plan_output]
    if no_change:
        return DriftStatus.NONE, no_change

    changes = [m for m in CHANGE_MARKERS if m in plan_output]
    if changes:
        return DriftStatus.DETECTED, changes

    return DriftStatus.UNCLEAR, []


def analyze_plan(plan_output: str) -> PlanAnalysis:
    """Run every plan classification over one plan's text."""
    destructive = find_destructive_changes(plan_output)
    drift_status, drift_markers = classify_drift(plan_output)

    analysis = PlanAnalysis(
        has_destructive_changes=bool(destructive),
        drift_status=drift_status,
        markers=destructive + [m for m in drift_markers if m not in destructive],
        changes=summarize_plan_changes(plan_output),
        plan_output=plan_output,
    )
    logger.debug(
        f"Plan analysis: destructive={analysis.has_destructive_changes}, "
        f"drift={analysis.drift_status.value}"
    )
    return analysis
