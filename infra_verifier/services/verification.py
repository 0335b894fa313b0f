# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Assertion recorder shared by all resource verifiers.

A Verifier evaluates expectations in one of two modes:

- check: a failed expectation is recorded and evaluation continues
- require: a failed expectation is recorded and RequirementFailed is raised,
  which aborts the remainder of the section

The live suites assert on the resulting VerificationReport so every failure
of a section is reported at once.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Sized, TypeVar

from ..clients.aws_client import AWSAPIError
from ..models import Finding, Severity, VerificationReport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequirementFailed(AssertionError):
    """Raised when a required expectation fails."""

    def __init__(self, finding: Finding):
        super().__init__(finding.message)
        self.finding = finding


class Verifier:
    """
    Collects findings for one verification section.

    Every helper returns True when the expectation held so callers can
    skip dependent checks, mirroring how a test would branch on them.
    """

    def __init__(self, section: str):
        self.section = section
        self._findings: list[Finding] = []
        self._checks_run = 0
        self._aborted = False

    @property
    def findings(self) -> list[Finding]:
        return list(self._findings)

    @property
    def report(self) -> VerificationReport:
        return VerificationReport(
            section=self.section,
            findings=list(self._findings),
            checks_run=self._checks_run,
            aborted=self._aborted,
        )

    def _evaluate(
        self,
        passed: bool,
        check: str,
        message: str,
        required: bool,
        resource: str | None,
    ) -> bool:
        self._checks_run += 1
        if passed:
            return True

        severity = Severity.CRITICAL if required else Severity.ERROR
        finding = Finding(check=check, message=message, severity=severity, resource=resource)
        self._findings.append(finding)

        if required:
            logger.error(f"[{self.section}] requirement failed: {message}")
            self._aborted = True
            raise RequirementFailed(finding)

        logger.warning(f"[{self.section}] check failed: {message}")
        return False

    # =========================================================================
    # Base modes
    # =========================================================================

    def check(self, condition: bool, message: str, resource: str | None = None) -> bool:
        """Record a failure if condition is false and continue."""
        return self._evaluate(bool(condition), "condition", message, False, resource)

    def require(self, condition: bool, message: str, resource: str | None = None) -> bool:
        """Record a failure and abort the section if condition is false."""
        return self._evaluate(bool(condition), "condition", message, True, resource)

    # =========================================================================
    # Helpers
    # =========================================================================

    def equal(
        self,
        expected: Any,
        actual: Any,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        return self._evaluate(
            expected == actual,
            "equal",
            f"{message}: expected {expected!r}, got {actual!r}",
            required,
            resource,
        )

    def not_empty(
        self,
        value: Any,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        return self._evaluate(bool(value), "not_empty", message, required, resource)

    def not_none(
        self,
        value: Any,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        return self._evaluate(value is not None, "not_none", message, required, resource)

    def starts_with(
        self,
        value: str | None,
        prefix: str,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        passed = isinstance(value, str) and value.startswith(prefix)
        return self._evaluate(
            passed,
            "starts_with",
            f"{message}: {value!r} does not start with {prefix!r}",
            required,
            resource,
        )

    def contains(
        self,
        container: Any,
        item: Any,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        passed = container is not None and item in container
        return self._evaluate(passed, "contains", message, required, resource)

    def length(
        self,
        collection: Sized | None,
        expected: int,
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> bool:
        actual = len(collection) if collection is not None else 0
        return self._evaluate(
            actual == expected,
            "length",
            f"{message}: expected {expected}, got {actual}",
            required,
            resource,
        )

    def call(
        self,
        func: Callable[[], T],
        message: str,
        *,
        required: bool = False,
        resource: str | None = None,
    ) -> T | None:
        """
        Run an AWS call and record a failure if it raises AWSAPIError.

        Returns:
            The call's result, or None when it failed in check mode
        """
        try:
            result = func()
        except AWSAPIError as e:
            self._evaluate(False, "no_error", f"{message}: {e}", required, resource)
            return None
        self._checks_run += 1
        return result

    @contextmanager
    def guard(self) -> Iterator["Verifier"]:
        """
        Run a block whose failed requirements should only end that block.

        The failure is already recorded as a critical finding, so the
        report still fails.
        """
        try:
            yield self
        except RequirementFailed as e:
            logger.info(f"[{self.section}] aborted after: {e.finding.message}")
