# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Terraform CLI wrapper used by the verification suites."""

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Commands that take -input=false
_INPUT_COMMANDS = {"init", "plan", "apply", "destroy"}
# Commands that take -lock
_LOCK_COMMANDS = {"plan", "apply", "destroy"}
# Commands that accept -var
_VAR_COMMANDS = {"plan", "apply", "destroy"}
# Commands that need -auto-approve to run unattended
_AUTO_APPROVE_COMMANDS = {"apply", "destroy"}


class TerraformError(Exception):
    """Raised when a Terraform command fails."""

    def __init__(self, message: str, command: list[str] | None = None,
                 exit_code: int | None = None, output: str = ""):
        super().__init__(message)
        self.command = command or []
        self.exit_code = exit_code
        self.output = output


class TerraformNotFoundError(TerraformError):
    """Raised when the Terraform binary cannot be executed."""
    pass


class TerraformOutputError(TerraformError):
    """Raised when an output is missing or has an unexpected type."""
    pass


class TerraformOptions(BaseModel):
    """Options describing how to run Terraform against one root module."""

    terraform_dir: str = Field(..., description="Root module working directory")
    terraform_binary: str = Field("terraform", description="Terraform executable")
    no_color: bool = Field(True, description="Pass -no-color to every command")
    env_vars: dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables merged over the process environment"
    )
    vars: dict[str, str] = Field(
        default_factory=dict,
        description="Input variables passed as -var key=value"
    )
    lock: bool = Field(True, description="Hold the state lock during plan/apply/destroy")
    timeout_seconds: int = Field(1800, description="Per-command timeout", gt=0)


class TerraformClient:
    """
    Runs Terraform lifecycle commands and reads outputs.

    Every command runs in ``options.terraform_dir`` with the process
    environment overlaid by ``options.env_vars``. Failures raise
    TerraformError with the combined command output attached.
    """

    def __init__(self, options: TerraformOptions):
        self.options = options

    @property
    def working_dir(self) -> Path:
        return Path(self.options.terraform_dir)

    def format_args(self, command: str, *extra: str) -> list[str]:
        """
        Build the argument list for a Terraform command.

        Args:
            command: Terraform subcommand (init, plan, apply, ...)
            *extra: Additional arguments appended after the generated flags

        Returns:
            Argument list without the binary name
        """
        args = [command]

        if command in _INPUT_COMMANDS:
            args.append("-input=false")
        if command in _LOCK_COMMANDS:
            args.append(f"-lock={'true' if self.options.lock else 'false'}")
        if command in _AUTO_APPROVE_COMMANDS:
            args.append("-auto-approve")
        if command in _VAR_COMMANDS:
            for key, value in sorted(self.options.vars.items()):
                args.extend(["-var", f"{key}={value}"])
        if command == "output":
            args.append("-json")
        if self.options.no_color:
            args.append("-no-color")

        args.extend(extra)
        return args

    def _environment(self) -> dict[str, str]:
        env = os.environ.copy()
        env.update(self.options.env_vars)
        env.setdefault("TF_IN_AUTOMATION", "1")
        env.setdefault("TF_INPUT", "0")
        return env

    def _run(self, args: list[str], allowed_exit_codes: tuple[int, ...] = (0,)) -> subprocess.CompletedProcess:
        cmd = [self.options.terraform_binary, *args]
        logger.info(f"Running {' '.join(cmd)} in {self.options.terraform_dir}")

        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.working_dir),
                env=self._environment(),
                check=False,
                capture_output=True,
                text=True,
                timeout=self.options.timeout_seconds,
            )
        except FileNotFoundError as e:
            raise TerraformNotFoundError(
                f"Terraform binary not found: {self.options.terraform_binary}",
                command=cmd,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise TerraformError(
                f"{args[0]} timed out after {self.options.timeout_seconds}s",
                command=cmd,
            ) from e

        output = (result.stdout or "") + (result.stderr or "")
        logger.debug(f"terraform {args[0]} output:\n{output}")

        if result.returncode not in allowed_exit_codes:
            raise TerraformError(
                f"terraform {args[0]} failed with exit code {result.returncode}",
                command=cmd,
                exit_code=result.returncode,
                output=output,
            )
        return result

    def run_command(self, *args: str) -> str:
        """
        Run an arbitrary Terraform command.

        Returns:
            Combined stdout and stderr

        Raises:
            TerraformError: If the command exits non-zero or times out
        """
        result = self._run(list(args))
        return (result.stdout or "") + (result.stderr or "")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self) -> str:
        return self.run_command(*self.format_args("init"))

    def plan(self) -> str:
        """Run plan and return its text output."""
        return self.run_command(*self.format_args("plan"))

    def plan_exit_code(self) -> int:
        """
        Run plan with -detailed-exitcode.

        Returns:
            0 when there are no changes, 2 when changes are pending

        Raises:
            TerraformError: If plan itself fails (exit code 1)
        """
        args = self.format_args("plan", "-detailed-exitcode")
        return self._run(args, allowed_exit_codes=(0, 2)).returncode

    def apply(self) -> str:
        return self.run_command(*self.format_args("apply"))

    def init_and_apply(self) -> str:
        self.init()
        return self.apply()

    def validate(self) -> str:
        return self.run_command(*self.format_args("validate"))

    def init_and_validate(self) -> str:
        self.init()
        return self.validate()

    def destroy(self) -> str:
        return self.run_command(*self.format_args("destroy"))

    # =========================================================================
    # Outputs
    # =========================================================================

    def output_all(self) -> dict[str, Any]:
        """
        Read every output value.

        Returns:
            Mapping of output name to its decoded value
        """
        result = self._run(self.format_args("output"))
        try:
            raw = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise TerraformOutputError(
                f"terraform output returned invalid JSON: {e}",
                output=result.stdout,
            ) from e

        return {name: entry.get("value") for name, entry in raw.items()}

    def _output_value(self, name: str) -> Any:
        outputs = self.output_all()
        if name not in outputs:
            raise TerraformOutputError(f"Output '{name}' not found")
        return outputs[name]

    def output(self, name: str) -> str:
        """Read a scalar output as the string Terraform would print."""
        return stringify_output(self._output_value(name))

    def output_list(self, name: str) -> list[str]:
        value = self._output_value(name)
        if not isinstance(value, list):
            raise TerraformOutputError(
                f"Output '{name}' is a {type(value).__name__}, expected a list"
            )
        return [stringify_output(item) for item in value]

    def output_map(self, name: str) -> dict[str, str]:
        value = self._output_value(name)
        if not isinstance(value, dict):
            raise TerraformOutputError(
                f"Output '{name}' is a {type(value).__name__}, expected a map"
            )
        return {key: stringify_output(item) for key, item in value.items()}


def stringify_output(value: Any) -> str:
    """Render a decoded output value the way the Terraform CLI prints it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True)
