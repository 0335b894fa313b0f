"""Provisioning, configuration and drift checks for the claim management infrastructure."""

__version__ = "0.1.0"
