"""Pydantic models for Rancher resources and the service upgrade payload.

The Rancher v1 API speaks camelCase JSON. Models expose snake_case attributes
and accept either spelling on input; payloads are produced with the camelCase
aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMAGE_KEY = "imageUuid"
SECRETS_KEY = "secrets"


class LaunchConfig(BaseModel):
    """Launch configuration of a service container.

    Only the image reference, secrets and name are read or written by the
    upgrade workflow. Every other key is kept as an extra field so it is sent
    back to Rancher exactly as it was received.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str | None = Field(default=None, description="Sidekick container name")
    image_uuid: str | None = Field(
        default=None,
        alias=IMAGE_KEY,
        description="Qualified image reference (e.g. docker:nginx:1.25)",
    )
    secrets: list[Any] | None = Field(
        default=None, alias=SECRETS_KEY, description="Secret references"
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the launch configuration as Rancher JSON."""
        payload = self.model_dump(by_alias=True, exclude_unset=True)
        payload.update(self.model_extra or {})
        return payload


class Environment(BaseModel):
    """Rancher environment (a "project" in the v1 API)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Environment identifier")
    name: str = Field(..., description="Environment name")


class Stack(BaseModel):
    """Rancher stack (an "environment" in the v1 API)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Stack identifier")
    env_id: str = Field(..., description="Owning environment identifier")
    name: str = Field(..., description="Stack name")


class Service(BaseModel):
    """Snapshot of a Rancher service.

    Attributes:
        id: Service identifier
        env_id: Owning environment identifier
        stack_id: Owning stack identifier
        name: Service name
        state: Lifecycle state (active, upgrading, upgraded, ...)
        health_state: Health overlay (healthy, unhealthy, ...)
        launch_config: Primary container launch configuration
        secondary_launch_configs: Sidekick launch configurations, in order
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Service identifier")
    env_id: str = Field(default="", description="Owning environment identifier")
    stack_id: str = Field(default="", description="Owning stack identifier")
    name: str = Field(default="", description="Service name")
    state: str = Field(default="", description="Service lifecycle state")
    health_state: str | None = Field(
        default=None, alias="healthState", description="Service health overlay"
    )
    launch_config: LaunchConfig = Field(
        default_factory=LaunchConfig, alias="launchConfig"
    )
    secondary_launch_configs: list[LaunchConfig] = Field(
        default_factory=list, alias="secondaryLaunchConfigs"
    )

    @field_validator("launch_config", mode="before")
    @classmethod
    def default_launch_config(cls, v: Any) -> Any:
        """Treat a null launch configuration as empty."""
        return {} if v is None else v

    @field_validator("secondary_launch_configs", mode="before")
    @classmethod
    def default_secondary_launch_configs(cls, v: Any) -> Any:
        """Treat null secondary launch configurations as an empty list."""
        return [] if v is None else v

    @property
    def is_unhealthy(self) -> bool:
        """Whether the health overlay reports the service as unhealthy."""
        return self.health_state == "unhealthy"


class InServiceStrategy(BaseModel):
    """In-service (rolling) upgrade strategy."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    batch_size: int = Field(default=1, alias="batchSize")
    interval_millis: int = Field(default=0, alias="intervalMillis")
    start_first: bool = Field(default=False, alias="startFirst")
    launch_config: LaunchConfig = Field(
        default_factory=LaunchConfig, alias="launchConfig"
    )
    secondary_launch_configs: list[LaunchConfig] = Field(
        default_factory=list, alias="secondaryLaunchConfigs"
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the strategy as Rancher JSON, omitting empty values."""
        payload: dict[str, Any] = {}
        if self.batch_size:
            payload["batchSize"] = self.batch_size
        if self.interval_millis:
            payload["intervalMillis"] = self.interval_millis
        if self.start_first:
            payload["startFirst"] = True
        launch_config = self.launch_config.to_payload()
        if launch_config:
            payload["launchConfig"] = launch_config
        if self.secondary_launch_configs:
            payload["secondaryLaunchConfigs"] = [
                config.to_payload() for config in self.secondary_launch_configs
            ]
        return payload


class UpgradeRequest(BaseModel):
    """Body of the service ``upgrade`` action."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    in_service_strategy: InServiceStrategy = Field(
        default_factory=InServiceStrategy, alias="inServiceStrategy"
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the request as Rancher JSON."""
        return {"inServiceStrategy": self.in_service_strategy.to_payload()}
