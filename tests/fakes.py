"""In-memory fakes shared by rancher-service-up tests."""

from __future__ import annotations

import threading
from typing import Any

from rancherup.models.rancher import Service, UpgradeRequest

ENV_ID = "1a5"
STACK_ID = "1st7"
SERVICE_ID = "1s42"

PROJECTS_PATH = "projects"
STACKS_PATH = f"projects/{ENV_ID}/environments"
SERVICES_PATH = f"projects/{ENV_ID}/environments/{STACK_ID}/services"


class FakeClock:
    """Clock that advances only when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float, cancel: threading.Event | None = None) -> bool:
        if cancel is not None and cancel.is_set():
            return True
        self.sleeps.append(seconds)
        self.now += seconds
        return False


class FakeRancherClient:
    """In-memory stand-in for RancherClient.

    Collections are served by path. Service status checks return scripted
    values in order; the last value repeats once the script runs out, and
    exception instances are raised instead of returned.
    """

    def __init__(
        self,
        collections: dict[str, list[dict[str, Any]]],
        statuses: list[str | Exception] | None = None,
    ) -> None:
        self.collections = collections
        self.statuses: list[str | Exception] = list(statuses or ["active"])
        self.actions: list[str] = []
        self.requests: list[UpgradeRequest] = []
        self.list_calls: list[str] = []
        self.status_calls = 0
        self.fail_action: dict[str, Exception] = {}

    def list_collection(self, path: str) -> list[dict[str, Any]]:
        self.list_calls.append(path)
        return self.collections.get(path, [])

    def get_service_status(self, service: Service) -> str:
        self.status_calls += 1
        value = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if isinstance(value, Exception):
            raise value
        return value

    def upgrade_service(self, service: Service, request: UpgradeRequest) -> None:
        self._action("upgrade")
        self.requests.append(request)

    def finish_upgrade(self, service: Service) -> None:
        self._action("finishupgrade")

    def rollback_upgrade(self, service: Service) -> None:
        self._action("rollback")

    def _action(self, name: str) -> None:
        if name in self.fail_action:
            raise self.fail_action[name]
        self.actions.append(name)


def make_service_item(
    name: str = "api",
    state: str = "active",
    health_state: str = "healthy",
    service_id: str = SERVICE_ID,
    **extra: Any,
) -> dict[str, Any]:
    """Build a service item as returned by the Rancher services collection."""
    item: dict[str, Any] = {
        "id": service_id,
        "type": "service",
        "name": name,
        "state": state,
        "healthState": health_state,
        "launchConfig": {
            "imageUuid": "docker:api:1.2.2",
            "ports": ["8080:8080/tcp"],
            "environment": {"MODE": "prod"},
            "secrets": [{"secretId": "1se1"}],
        },
        "secondaryLaunchConfigs": [],
    }
    item.update(extra)
    return item


def make_collections(
    service_item: dict[str, Any] | None = None,
) -> dict[str, list[dict[str, Any]]]:
    """Build the three collections resolved for Default/web/api."""
    return {
        PROJECTS_PATH: [
            {"id": "1a1", "name": "Staging"},
            {"id": ENV_ID, "name": "Default"},
        ],
        STACKS_PATH: [{"id": STACK_ID, "name": "web"}],
        SERVICES_PATH: [
            make_service_item(name="worker", service_id="1s41"),
            service_item or make_service_item(),
        ],
    }

