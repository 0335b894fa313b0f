"""Terraform and AWS client wrappers."""

from .aws_client import AWSClient, AWSAPIError
from .terraform_client import (
    TerraformClient,
    TerraformError,
    TerraformNotFoundError,
    TerraformOptions,
    TerraformOutputError,
)

__all__ = [
    "AWSClient",
    "AWSAPIError",
    "TerraformClient",
    "TerraformError",
    "TerraformNotFoundError",
    "TerraformOptions",
    "TerraformOutputError",
]
