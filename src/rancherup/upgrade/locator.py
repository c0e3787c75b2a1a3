"""Resolve Rancher environment, stack and service names to identifiers."""

from __future__ import annotations

import logging
from typing import Any

from rancherup.client.transport import RancherClient
from rancherup.lib.errors import NotFoundError, TransportError, ValidationError
from rancherup.models.rancher import Environment, Service, Stack

logger = logging.getLogger(__name__)


class ResourceLocator:
    """Look up Rancher resources by exact name.

    Each lookup lists one collection and returns the first item whose name
    equals the requested one. Nothing is cached.
    """

    def __init__(self, client: RancherClient) -> None:
        self._client = client

    def resolve_environment(self, name: str) -> Environment:
        """Resolve an environment (Rancher project) by name.

        Raises:
            ValidationError: If name is blank
            NotFoundError: If no environment has that name
            TransportError: If the collection cannot be listed
        """
        name = _require("env_name", name)
        item = self._find("projects", name, kind="environment")
        env = Environment(id=str(item["id"]), name=name)
        logger.debug(f"Environment ID = [{env.id}], Name = [{env.name}]")
        return env

    def resolve_stack(self, env_id: str, name: str) -> Stack:
        """Resolve a stack within an environment by name.

        Raises:
            ValidationError: If env_id or name is blank
            NotFoundError: If no stack has that name
            TransportError: If the collection cannot be listed
        """
        env_id = _require("env_id", env_id)
        name = _require("stack_name", name)
        item = self._find(f"projects/{env_id}/environments", name, kind="stack")
        stack = Stack(id=str(item["id"]), env_id=env_id, name=name)
        logger.debug(f"Stack ID = [{stack.id}], Name = [{stack.name}]")
        return stack

    def resolve_service(self, env_id: str, stack_id: str, name: str) -> Service:
        """Resolve a service within a stack by name.

        Raises:
            ValidationError: If any argument is blank
            NotFoundError: If no service has that name
            TransportError: If the collection cannot be listed or the service
                item is malformed
        """
        env_id = _require("env_id", env_id)
        stack_id = _require("stack_id", stack_id)
        name = _require("service_name", name)
        item = self._find(
            f"projects/{env_id}/environments/{stack_id}/services", name, kind="service"
        )
        try:
            service = Service.model_validate(
                {**item, "id": str(item["id"]), "env_id": env_id, "stack_id": stack_id}
            )
        except ValueError as e:
            raise TransportError(
                operation="list", message=f"Invalid payload for service [{name}]: {e}"
            ) from e
        logger.debug(f"Service ID = [{service.id}], Name = [{service.name}]")
        return service

    def _find(self, path: str, name: str, kind: str) -> dict[str, Any]:
        for item in self._client.list_collection(path):
            if item.get("name") == name and item.get("id") is not None:
                return item
        raise NotFoundError(kind=kind, name=name)


def _require(field: str, value: str | None) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(
            field=field,
            message=f"argument [{field}] can't be blank",
            expected="non-blank string",
            actual=repr(value),
        )
    return value
