# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Service for loading the expected configuration of an environment."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..models import ExpectedInfrastructure

logger = logging.getLogger(__name__)


class ExpectationsValidationError(Exception):
    """Raised when an expectations file is invalid."""

    pass


class ExpectationsNotFoundError(Exception):
    """Raised when an expectations file is not found."""

    pass


class ExpectationService:
    """
    Loads and caches ExpectedInfrastructure.

    Without a path the built-in dev defaults are used. A JSON file only
    needs to list the fields that differ from those defaults.
    """

    def __init__(self, expectations_path: str | Path | None = None):
        """
        Initialize the ExpectationService.

        Args:
            expectations_path: Path to the expectations JSON file, or None for defaults.
        """
        self._expected: ExpectedInfrastructure | None = None
        self._path = Path(expectations_path) if expectations_path else None

    def load(self, expectations_path: str | Path | None = None) -> ExpectedInfrastructure:
        """
        Load expectations from a JSON file.

        Args:
            expectations_path: Optional path overriding the instance path.

        Returns:
            ExpectedInfrastructure: The validated expectations

        Raises:
            ExpectationsNotFoundError: If the file doesn't exist
            ExpectationsValidationError: If the content is invalid
        """
        path = Path(expectations_path) if expectations_path else self._path

        if path is None:
            logger.debug("No expectations file configured, using dev defaults")
            self._expected = ExpectedInfrastructure()
            return self._expected

        if not path.exists():
            raise ExpectationsNotFoundError(f"Expectations file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ExpectationsValidationError(f"Invalid JSON in expectations file {path}: {e}") from e
        except OSError as e:
            raise ExpectationsValidationError(f"Error reading expectations file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ExpectationsValidationError(
                f"Expectations file {path} must contain a JSON object"
            )

        try:
            self._expected = ExpectedInfrastructure(**data)
        except ValidationError as e:
            raise ExpectationsValidationError(f"Invalid expectations in {path}: {e}") from e

        logger.info(f"Loaded expectations from {path}")
        return self._expected

    def get_expected(self) -> ExpectedInfrastructure:
        """Return the loaded expectations, loading them on first use."""
        if self._expected is None:
            self.load()
        return self._expected
