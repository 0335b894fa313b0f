"""Typed views over Terraform output values."""

from typing import Any

from pydantic import BaseModel, Field

from ..clients.terraform_client import TerraformOutputError, stringify_output


def _scalar(outputs: dict[str, Any], name: str) -> str:
    if name not in outputs:
        raise TerraformOutputError(f"Output '{name}' not found")
    return stringify_output(outputs[name])


def _optional(outputs: dict[str, Any], name: str) -> str | None:
    if name not in outputs:
        return None
    return stringify_output(outputs[name])


def _list(outputs: dict[str, Any], name: str) -> list[str]:
    value = outputs.get(name)
    if not isinstance(value, list):
        raise TerraformOutputError(f"Output '{name}' is missing or not a list")
    return [stringify_output(v) for v in value]


def _map(outputs: dict[str, Any], name: str) -> dict[str, str]:
    value = outputs.get(name)
    if not isinstance(value, dict):
        raise TerraformOutputError(f"Output '{name}' is missing or not a map")
    return {k: stringify_output(v) for k, v in value.items()}


class CoreOutputs(BaseModel):
    """Network, storage, encryption, identity and tag outputs."""

    vpc_id: str
    vpc_cidr: str
    public_subnet_ids: list[str] = Field(default_factory=list)
    private_subnet_ids: list[str] = Field(default_factory=list)
    s3_bucket_names: dict[str, str] = Field(default_factory=dict)
    kms_key_arns: dict[str, str] = Field(default_factory=dict)
    iam_role_arns: dict[str, str] = Field(default_factory=dict)
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def subnet_ids(self) -> list[str]:
        return self.public_subnet_ids + self.private_subnet_ids

    @classmethod
    def from_outputs(cls, outputs: dict[str, Any]) -> "CoreOutputs":
        return cls(
            vpc_id=_scalar(outputs, "vpc_id"),
            vpc_cidr=_scalar(outputs, "vpc_cidr"),
            public_subnet_ids=_list(outputs, "public_subnet_ids"),
            private_subnet_ids=_list(outputs, "private_subnet_ids"),
            s3_bucket_names=_map(outputs, "s3_bucket_names"),
            kms_key_arns=_map(outputs, "kms_key_arns"),
            iam_role_arns=_map(outputs, "iam_role_arns"),
            tags=_map(outputs, "tags"),
        )


class MessagingOutputs(BaseModel):
    """Queue, dead-letter queue, table and bucket outputs."""

    sqs_queue_arn: str
    sqs_queue_url: str
    sqs_dlq_arn: str
    sqs_dlq_url: str | None = None
    dynamodb_table_arn: str
    dynamodb_table_name: str
    s3_bucket_names: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_outputs(cls, outputs: dict[str, Any]) -> "MessagingOutputs":
        return cls(
            sqs_queue_arn=_scalar(outputs, "sqs_queue_arn"),
            sqs_queue_url=_scalar(outputs, "sqs_queue_url"),
            sqs_dlq_arn=_scalar(outputs, "sqs_dlq_arn"),
            sqs_dlq_url=_optional(outputs, "sqs_dlq_url"),
            dynamodb_table_arn=_scalar(outputs, "dynamodb_table_arn"),
            dynamodb_table_name=_scalar(outputs, "dynamodb_table_name"),
            s3_bucket_names=_map(outputs, "s3_bucket_names"),
        )
