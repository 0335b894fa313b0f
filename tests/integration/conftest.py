"""Fixtures for the live suites.

These suites provision the dev environment with Terraform and read real
AWS state. They are skipped unless the Terraform binary is installed, the
root module exists and INFRA_LIVE_TESTS=1 is set.
"""

import logging
import shutil
from typing import Any

import pytest

from infra_verifier.config import get_settings
from infra_verifier.container import VerifierContainer
from infra_verifier.services.verification import Verifier

logger = logging.getLogger(__name__)


def _missing_prerequisite(container: VerifierContainer, live: bool) -> str | None:
    if live and not container.settings.live_tests_enabled:
        return "set INFRA_LIVE_TESTS=1 to provision real infrastructure"
    if shutil.which(container.settings.terraform_binary) is None:
        return "Terraform CLI is not installed"
    if not container.terraform_dir.is_dir():
        return f"Terraform directory not found: {container.terraform_dir}"
    return None


class Deployment:
    """
    Terraform lifecycle shared by the ordered steps of one live suite.

    Steps after apply call require_applied() so they skip instead of
    failing with confusing errors when apply did not complete.
    """

    def __init__(self, container: VerifierContainer):
        self.container = container
        self.initialized = False
        self.applied = False

    @property
    def terraform(self):
        return self.container.terraform

    def init(self) -> None:
        self.terraform.init()
        self.initialized = True

    def apply(self) -> None:
        self.init()
        self.terraform.apply()
        self.applied = True

    def require_applied(self) -> None:
        if not self.applied:
            pytest.skip("terraform apply did not complete")

    def outputs(self) -> dict[str, Any]:
        return self.terraform.output_all()

    def destroy(self) -> None:
        if not self.initialized:
            logger.info("Terraform was never initialized, nothing to destroy")
            return
        logger.info(f"Destroying resources in {self.container.terraform_dir}")
        self.terraform.destroy()


@pytest.fixture(scope="module")
def live_container():
    """Container for a suite that provisions real infrastructure."""
    container = VerifierContainer(get_settings())
    reason = _missing_prerequisite(container, live=True)
    if reason:
        pytest.skip(reason)
    return container


@pytest.fixture
def validate_container():
    """Container for side-effect-free init/validate runs."""
    container = VerifierContainer(get_settings())
    reason = _missing_prerequisite(container, live=False)
    if reason:
        pytest.skip(reason)
    return container


@pytest.fixture(scope="module")
def deployment(live_container):
    """Ordered-step deployment; resources are destroyed when the module finishes."""
    state = Deployment(live_container)
    yield state
    state.destroy()


@pytest.fixture
def assert_passed():
    """Assert a verifier recorded no findings, showing every failure otherwise."""
    def _assert(verifier: Verifier) -> None:
        report = verifier.report
        assert report.passed, report.summary()
    return _assert
