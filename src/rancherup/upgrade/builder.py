"""Construction of the service upgrade request."""

from __future__ import annotations

from collections.abc import Sequence

from rancherup.config.defaults import IMAGE_PREFIX
from rancherup.lib.errors import ValidationError
from rancherup.models.config import SidekickImage
from rancherup.models.rancher import InServiceStrategy, Service, UpgradeRequest


def qualify_image(image: str) -> str:
    """Return the Rancher image reference for a docker image[:tag]."""
    return f"{IMAGE_PREFIX}{image}"


def build_upgrade_request(
    service: Service | None,
    batch_size: int,
    batch_interval: int,
    start_first: bool,
    image: str,
    upgrade_sidekicks: bool = False,
    sidekick_images: Sequence[SidekickImage] = (),
) -> UpgradeRequest:
    """Build an in-service upgrade request from a service snapshot.

    The service's launch configuration is copied with the image replaced and
    secrets cleared. Sidekick configurations are only carried over when
    ``upgrade_sidekicks`` is set; a sidekick whose name matches one of
    ``sidekick_images`` gets its image replaced by that name. The override
    tag is not applied to the image reference.

    Args:
        service: Resolved service snapshot (left unmodified)
        batch_size: Number of containers to upgrade at once
        batch_interval: Seconds to wait between batches
        start_first: Start new containers before stopping old ones
        image: New image[:tag] for the primary container
        upgrade_sidekicks: Include sidekick configurations
        sidekick_images: Replacement sidekick images

    Returns:
        UpgradeRequest ready to be posted

    Raises:
        ValidationError: If image is blank, service is missing or batch_size < 1
    """
    image = (image or "").strip()
    if not image:
        raise ValidationError(
            field="image",
            message="argument [image] can't be blank",
            expected="docker image[:tag]",
            actual=repr(image),
        )
    if service is None:
        raise ValidationError(
            field="service",
            message="argument [service] can't be null",
            expected="resolved Service",
            actual="None",
        )
    if batch_size < 1:
        raise ValidationError(
            field="batch_size",
            message="batch size must be positive",
            expected="integer >= 1",
            actual=str(batch_size),
        )

    launch_config = service.launch_config.model_copy(deep=True)
    launch_config.image_uuid = qualify_image(image)
    launch_config.secrets = []

    strategy = InServiceStrategy(
        batch_size=batch_size,
        interval_millis=batch_interval * 1000,
        start_first=start_first,
        launch_config=launch_config,
    )

    if upgrade_sidekicks:
        strategy.secondary_launch_configs = [
            config.model_copy(deep=True) for config in service.secondary_launch_configs
        ]

    request = UpgradeRequest(in_service_strategy=strategy)
    if not sidekick_images:
        return request

    for config in strategy.secondary_launch_configs:
        for sidekick in sidekick_images:
            if config.name == sidekick.name:
                config.image_uuid = qualify_image(sidekick.name)
                break

    return request
