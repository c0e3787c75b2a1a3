"""Rancher service upgrade engine.

This package resolves the target service, builds the upgrade request and
drives the upgrade state machine to completion or rollback.
"""

from rancherup.upgrade.builder import build_upgrade_request, qualify_image
from rancherup.upgrade.clock import Clock, SystemClock
from rancherup.upgrade.locator import ResourceLocator
from rancherup.upgrade.orchestrator import (
    UpgradeOrchestrator,
    UpgradeOutcome,
    UpgradeResult,
)

__all__ = [
    "Clock",
    "ResourceLocator",
    "SystemClock",
    "UpgradeOrchestrator",
    "UpgradeOutcome",
    "UpgradeResult",
    "build_upgrade_request",
    "qualify_image",
]
