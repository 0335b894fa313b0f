# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Client container shared by the CLI and the live test suites.

Builds the Terraform and AWS clients and the expectations from one
Settings instance so every entry point runs against the same directory,
region and expected values.
"""

import logging
from pathlib import Path
from typing import Optional

from .clients.aws_client import AWSClient
from .clients.terraform_client import TerraformClient, TerraformOptions
from .config import Settings, settings as get_default_settings
from .models import ExpectedInfrastructure
from .services.expectation_service import ExpectationService

logger = logging.getLogger(__name__)


class VerifierContainer:
    """
    Lazily creates the clients a verification run needs.

    Usage::

        container = VerifierContainer()
        container.terraform.init_and_apply()
        outputs = CoreOutputs.from_outputs(container.terraform.output_all())
        verify_network(verifier, container.aws_client, outputs, container.expected)
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings: Settings = settings or get_default_settings()
        self._terraform: Optional[TerraformClient] = None
        self._aws_client: Optional[AWSClient] = None
        self._expectation_service = ExpectationService(self._settings.expectations_path)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def terraform_dir(self) -> Path:
        return Path(self._settings.terraform_dir)

    def terraform_options(self) -> TerraformOptions:
        s = self._settings
        return TerraformOptions(
            terraform_dir=s.terraform_dir,
            terraform_binary=s.terraform_binary,
            no_color=s.no_color,
            env_vars={"AWS_DEFAULT_REGION": s.aws_region},
            timeout_seconds=s.terraform_timeout,
        )

    @property
    def terraform(self) -> TerraformClient:
        if self._terraform is None:
            self._terraform = TerraformClient(self.terraform_options())
            logger.debug(f"Terraform client created for {self._settings.terraform_dir}")
        return self._terraform

    @property
    def aws_client(self) -> AWSClient:
        if self._aws_client is None:
            logger.info(f"Creating AWS client for region {self._settings.aws_region}")
            self._aws_client = AWSClient(region=self._settings.aws_region)
        return self._aws_client

    @property
    def expected(self) -> ExpectedInfrastructure:
        return self._expectation_service.get_expected()
