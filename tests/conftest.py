"""Pytest configuration and shared fixtures for rancher-service-up tests."""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest

from rancherup.models.rancher import Service
from tests.fakes import ENV_ID, STACK_ID, FakeClock, make_service_item


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a clock that never sleeps in real time."""
    return FakeClock()


@pytest.fixture
def service() -> Service:
    """Provide a resolved service snapshot with two sidekicks."""
    return Service.model_validate(
        {
            **make_service_item(
                secondaryLaunchConfigs=[
                    {"name": "cache", "imageUuid": "docker:redis:6", "memory": 256},
                    {"name": "log", "imageUuid": "docker:fluentd:1"},
                ]
            ),
            "env_id": ENV_ID,
            "stack_id": STACK_ID,
        }
    )


@pytest.fixture
def isolated_env() -> Generator[dict[str, str], None, None]:
    """Provide isolated environment variables for testing.

    Saves current environment and restores after test.
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)
