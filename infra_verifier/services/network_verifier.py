# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""Checks on the live VPC and its subnets."""

import logging

from ..clients.aws_client import AWSClient
from ..models import CoreOutputs, ExpectedInfrastructure
from .verification import Verifier

logger = logging.getLogger(__name__)


def verify_vpc(
    verifier: Verifier,
    aws_client: AWSClient,
    vpc_id: str,
    expected: ExpectedInfrastructure,
) -> None:
    """Verify the VPC exists with the expected CIDR and DNS attributes."""
    vpcs = verifier.call(
        lambda: aws_client.describe_vpcs([vpc_id]),
        "Should be able to describe VPC",
        required=True,
        resource=vpc_id,
    )
    verifier.length(vpcs, 1, "VPC should exist", required=True, resource=vpc_id)

    verifier.equal(
        expected.vpc_cidr, vpcs[0].get("CidrBlock"), "VPC CIDR should match", resource=vpc_id
    )

    dns_hostnames = verifier.call(
        lambda: aws_client.vpc_attribute(vpc_id, "enableDnsHostnames"),
        "Should be able to read enableDnsHostnames",
        required=True,
        resource=vpc_id,
    )
    verifier.equal(
        expected.dns_hostnames_enabled,
        dns_hostnames,
        "VPC DNS hostnames setting should match",
        resource=vpc_id,
    )

    dns_support = verifier.call(
        lambda: aws_client.vpc_attribute(vpc_id, "enableDnsSupport"),
        "Should be able to read enableDnsSupport",
        required=True,
        resource=vpc_id,
    )
    verifier.equal(
        expected.dns_support_enabled,
        dns_support,
        "VPC DNS support setting should match",
        resource=vpc_id,
    )


def verify_subnets(
    verifier: Verifier,
    aws_client: AWSClient,
    public_subnet_ids: list[str],
    private_subnet_ids: list[str],
) -> None:
    """Verify every subnet exists and public subnets map public IPs on launch."""
    all_subnet_ids = list(public_subnet_ids) + list(private_subnet_ids)

    subnets = verifier.call(
        lambda: aws_client.describe_subnets(all_subnet_ids),
        "Should be able to describe subnets",
        required=True,
    )
    verifier.length(
        subnets,
        len(all_subnet_ids),
        f"Should have {len(all_subnet_ids)} subnets total",
        required=True,
    )

    public_ids = set(public_subnet_ids)
    for subnet in subnets:
        subnet_id = subnet.get("SubnetId")
        if subnet_id in public_ids:
            verifier.check(
                subnet.get("MapPublicIpOnLaunch", False),
                f"Subnet {subnet_id} should be public",
                resource=subnet_id,
            )


def verify_network(
    verifier: Verifier,
    aws_client: AWSClient,
    outputs: CoreOutputs,
    expected: ExpectedInfrastructure,
) -> None:
    verify_vpc(verifier, aws_client, outputs.vpc_id, expected)
    verify_subnets(verifier, aws_client, outputs.public_subnet_ids, outputs.private_subnet_ids)
    logger.info(f"Network verified for {outputs.vpc_id}")
