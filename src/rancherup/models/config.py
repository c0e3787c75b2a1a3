"""Pydantic models for upgrade run configuration.

These models hold the validated values an upgrade run needs: where the
Rancher server is, which service to upgrade, the new image and the rolling
upgrade tuning.
"""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rancherup.config.defaults import (
    DEFAULT_BATCH_INTERVAL,
    DEFAULT_BATCH_SIZE,
    DEFAULT_ENVIRONMENT,
    DEFAULT_UPGRADE_TIMEOUT,
)


class SidekickImage(BaseModel):
    """Replacement image for a sidekick container, matched by name.

    Attributes:
        name: Sidekick image name, also used to match the sidekick
        tag: Optional image tag
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Sidekick image name")
    tag: str | None = Field(default=None, description="Sidekick image tag")

    @classmethod
    def parse(cls, value: str) -> SidekickImage:
        """Parse a ``name[:tag]`` token.

        Args:
            value: Token such as ``cache`` or ``cache:1.0``

        Returns:
            Parsed SidekickImage

        Raises:
            ValueError: If the token is blank or holds more than one colon
        """
        token = value.strip()
        if not token:
            raise ValueError("Sidekick image cannot be empty")
        if token.count(":") > 1:
            raise ValueError(f"Invalid format docker image name [{value}]")
        if ":" in token:
            name, tag = token.split(":", 1)
            return cls(name=name, tag=tag)
        return cls(name=token)

    def __str__(self) -> str:
        return f"{self.name}:{self.tag}" if self.tag else self.name


class UpgradeConfig(BaseModel):
    """Validated parameters for a single service upgrade run.

    Attributes:
        url: Rancher server URL (e.g. http://rancher:8080)
        access_key: Environment or account API key
        secret_key: Secret for the API key
        environment: Rancher environment name
        stack: Stack name within the environment
        service: Service name within the stack
        image: New image[:tag] for the service
        start_first: Start new containers before stopping old ones
        batch_size: Number of containers to upgrade at once
        batch_interval: Seconds to wait between upgrade batches
        timeout: Seconds to wait for each blocking state change
        wait: Wait for the upgrade to converge before exiting
        finish_upgrade: Mark the upgrade as finished once it converges
        upgrade_sidekicks: Include sidekick configurations in the upgrade
        sidekick_images: Replacement sidekick images
    """

    model_config = ConfigDict(extra="forbid")

    url: str = Field(..., description="Rancher server URL")
    access_key: str = Field(..., description="Rancher API access key")
    secret_key: str = Field(..., description="Rancher API secret key")
    environment: str = Field(
        default=DEFAULT_ENVIRONMENT, description="Rancher environment name"
    )
    stack: str = Field(..., description="Rancher stack name")
    service: str = Field(..., description="Rancher service name")
    image: str = Field(..., description="New image[:tag] for the service")
    start_first: bool = Field(
        default=False, description="Start new containers before stopping old ones"
    )
    batch_size: int = Field(
        default=DEFAULT_BATCH_SIZE, ge=1, description="Containers upgraded at once"
    )
    batch_interval: int = Field(
        default=DEFAULT_BATCH_INTERVAL,
        ge=0,
        description="Seconds to wait between upgrade batches",
    )
    timeout: int = Field(
        default=DEFAULT_UPGRADE_TIMEOUT,
        ge=1,
        description="Seconds to wait for each blocking state change",
    )
    wait: bool = Field(default=True, description="Wait for the upgrade to converge")
    finish_upgrade: bool = Field(
        default=True, description="Mark the upgrade as finished after it completes"
    )
    upgrade_sidekicks: bool = Field(
        default=False, description="Upgrade service sidekicks at the same time"
    )
    sidekick_images: list[SidekickImage] = Field(
        default_factory=list, description="Replacement sidekick images"
    )

    @field_validator(
        "url",
        "access_key",
        "secret_key",
        "environment",
        "stack",
        "service",
        "image",
    )
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip surrounding whitespace and reject blank values."""
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be blank")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the Rancher URL has an http(s) scheme and a host."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"Invalid Rancher URL: {v}. Expected e.g. http://rancher:8080"
            )
        return v
