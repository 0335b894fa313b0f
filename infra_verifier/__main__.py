"""
Command-line entry point for the claim infrastructure verifier.

Usage:
    python -m infra_verifier validate      # terraform init + validate
    python -m infra_verifier plan          # init + plan, warn on destructive changes
    python -m infra_verifier drift         # plan against deployed state; exit 2 on drift
    python -m infra_verifier outputs       # print outputs as JSON
    python -m infra_verifier verify        # check deployed resources against expectations

Configuration comes from environment variables (see infra_verifier.config).
"""

import argparse
import json
import logging
import sys

from .clients.aws_client import AWSAPIError
from .clients.terraform_client import TerraformError
from .config import settings
from .container import VerifierContainer
from .logging_config import configure_logging
from .models import CoreOutputs, DriftStatus, MessagingOutputs, VerificationReport
from .services.expectation_service import (
    ExpectationsNotFoundError,
    ExpectationsValidationError,
)
from .services.messaging_verifier import (
    verify_bucket_notification,
    verify_dlq,
    verify_queue,
)
from .services.network_verifier import verify_network
from .services.output_verifier import verify_core_outputs, verify_messaging_outputs
from .services.plan_analyzer import analyze_plan
from .services.storage_verifier import verify_buckets, verify_kms_keys
from .services.table_verifier import verify_table
from .services.verification import Verifier

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_DRIFT = 2


def _cmd_validate(container: VerifierContainer, args: argparse.Namespace) -> int:
    container.terraform.init_and_validate()
    print("Configuration is valid")
    return EXIT_OK


def _cmd_plan(container: VerifierContainer, args: argparse.Namespace) -> int:
    container.terraform.init()
    analysis = analyze_plan(container.terraform.plan())
    print(analysis.plan_output)
    if analysis.has_destructive_changes:
        logger.warning(f"Plan contains destructive changes: {', '.join(analysis.markers)}")
    return EXIT_OK


def _cmd_drift(container: VerifierContainer, args: argparse.Namespace) -> int:
    container.terraform.init()
    analysis = analyze_plan(container.terraform.plan())

    if analysis.drift_status == DriftStatus.NONE:
        print("No drift detected - infrastructure matches configuration")
        return EXIT_OK
    if analysis.drift_status == DriftStatus.DETECTED:
        print(f"Drift detected! Plan shows changes after apply:\n{analysis.plan_output}")
        return EXIT_DRIFT

    print(f"Plan output (review for drift):\n{analysis.plan_output}")
    return EXIT_OK


def _cmd_outputs(container: VerifierContainer, args: argparse.Namespace) -> int:
    print(json.dumps(container.terraform.output_all(), indent=2, sort_keys=True))
    return EXIT_OK


def _cmd_verify(container: VerifierContainer, args: argparse.Namespace) -> int:
    expected = container.expected
    aws = container.aws_client
    raw_outputs = container.terraform.output_all()
    reports: list[VerificationReport] = []

    core = CoreOutputs.from_outputs(raw_outputs)
    sections = [
        ("outputs", lambda v: verify_core_outputs(v, core, expected)),
        ("network", lambda v: verify_network(v, aws, core, expected)),
        ("buckets", lambda v: verify_buckets(v, aws, core.s3_bucket_names, expected)),
        ("kms", lambda v: verify_kms_keys(v, aws, core.kms_key_arns, expected)),
    ]

    if args.messaging:
        messaging = MessagingOutputs.from_outputs(raw_outputs)
        bucket = messaging.s3_bucket_names.get(expected.notification_bucket_key, "")
        sections += [
            ("messaging-outputs", lambda v: verify_messaging_outputs(v, messaging, expected)),
            ("queue", lambda v: verify_queue(
                v, aws, messaging.sqs_queue_url, messaging.sqs_dlq_arn, expected)),
            ("dlq", lambda v: verify_dlq(v, aws, messaging.sqs_dlq_url, expected)),
            ("table", lambda v: verify_table(v, aws, messaging.dynamodb_table_name, expected)),
            ("notification", lambda v: verify_bucket_notification(
                v, aws, bucket, messaging.sqs_queue_arn, expected)),
        ]

    for name, run in sections:
        verifier = Verifier(name)
        with verifier.guard():
            run(verifier)
        reports.append(verifier.report)

    for report in reports:
        print(report.summary())

    return EXIT_OK if all(r.passed for r in reports) else EXIT_FAILED


COMMANDS = {
    "validate": _cmd_validate,
    "plan": _cmd_plan,
    "drift": _cmd_drift,
    "outputs": _cmd_outputs,
    "verify": _cmd_verify,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infra_verifier",
        description="Provision checks and drift detection for the claim infrastructure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--terraform-dir",
        type=str,
        help="Override TERRAFORM_DIR",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Override LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("validate", help="Run terraform init and validate")
    subparsers.add_parser("plan", help="Run terraform plan and flag destructive changes")
    subparsers.add_parser("drift", help="Check deployed state for drift")
    subparsers.add_parser("outputs", help="Print terraform outputs as JSON")
    verify = subparsers.add_parser("verify", help="Verify deployed resources")
    verify.add_argument(
        "--messaging",
        action="store_true",
        help="Also verify queues, table and bucket notification",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the verifier CLI."""
    args = build_parser().parse_args(argv)

    config = settings()
    if args.terraform_dir:
        config = config.model_copy(update={"terraform_dir": args.terraform_dir})
    configure_logging(args.log_level or config.log_level)

    container = VerifierContainer(settings=config)
    try:
        return COMMANDS[args.command](container, args)
    except TerraformError as e:
        logger.error(f"{e}\n{e.output}")
        return EXIT_FAILED
    except AWSAPIError as e:
        logger.error(str(e))
        return EXIT_FAILED
    except (ExpectationsNotFoundError, ExpectationsValidationError) as e:
        logger.error(str(e))
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
