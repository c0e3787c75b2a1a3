"""Upgrade configuration loader.

Turns raw option values into a validated UpgradeConfig. Connection and
target options fall back to environment variables so the tool can run
unattended in CI pipelines.
"""

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from rancherup.config.defaults import (
    ENV_ACCESS_KEY,
    ENV_SECRET_KEY,
    ENV_SERVICE,
    ENV_STACK,
    ENV_URL,
)
from rancherup.config.validator import first_error_field, flatten_pydantic_errors
from rancherup.lib.errors import ConfigError
from rancherup.models.config import SidekickImage, UpgradeConfig

logger = logging.getLogger(__name__)

# Environment variable to field name mapping
ENV_VAR_MAP = {
    "url": ENV_URL,
    "access_key": ENV_ACCESS_KEY,
    "secret_key": ENV_SECRET_KEY,
    "stack": ENV_STACK,
    "service": ENV_SERVICE,
}

# Messages reported when a required value is missing after env fallback
REQUIRED_MESSAGES = {
    "url": f"Required Rancher URL (--url or {ENV_URL})",
    "access_key": f"Required Rancher access key (--key or {ENV_ACCESS_KEY})",
    "secret_key": f"Required Rancher access secret (--secret or {ENV_SECRET_KEY})",
    "environment": "Required Rancher environment name (--env)",
    "stack": f"Required Rancher stack name (--stack or {ENV_STACK})",
    "service": f"Required Rancher service name (--service or {ENV_SERVICE})",
    "image": "Required new service image (--image)",
}


def resolve_env_value(
    value: str | None,
    env_var: str,
    env: Mapping[str, str],
) -> str | None:
    """Resolve an option value with environment variable fallback.

    The environment is consulted when the value is missing, blank, or still
    holds an unexpanded reference to the variable (e.g. ``$RANCHER_URL``).

    Args:
        value: Value given on the command line, if any
        env_var: Environment variable name to fall back to
        env: Environment variables mapping

    Returns:
        Resolved value, or None when neither source provides one
    """
    if value is not None and value.strip() and env_var not in value:
        return value
    env_value = env.get(env_var)
    if env_value is not None and env_value.strip():
        logger.debug(f"Using {env_var} from environment")
        return env_value
    return None


def parse_sidekick_images(tokens: Iterable[str]) -> list[SidekickImage]:
    """Parse ``name[:tag]`` tokens into SidekickImage values.

    Raises:
        ConfigError: If a token is malformed
    """
    images: list[SidekickImage] = []
    for token in tokens:
        try:
            images.append(SidekickImage.parse(token))
        except ValueError as e:
            raise ConfigError(field="new_sidekick_image", message=str(e)) from e
    return images


def load_upgrade_config(
    options: Mapping[str, Any],
    env: Mapping[str, str] | None = None,
) -> UpgradeConfig:
    """Build a validated UpgradeConfig from raw option values.

    Args:
        options: Option values keyed by UpgradeConfig field name. None values
            are treated as not provided.
        env: Environment variables mapping (defaults to os.environ)

    Returns:
        Validated UpgradeConfig

    Raises:
        ConfigError: If a required value is missing or a value is invalid
    """
    env = os.environ if env is None else env
    resolved: dict[str, Any] = {
        key: value for key, value in options.items() if value is not None
    }

    for field, env_var in ENV_VAR_MAP.items():
        value = resolve_env_value(resolved.get(field), env_var, env)
        if value is None:
            resolved.pop(field, None)
        else:
            resolved[field] = value

    for field, message in REQUIRED_MESSAGES.items():
        if field == "environment" and field not in resolved:
            continue
        value = resolved.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ConfigError(field=field, message=message)

    sidekick_images = resolved.get("sidekick_images")
    if sidekick_images:
        parsed: list[SidekickImage] = []
        for image in sidekick_images:
            if isinstance(image, SidekickImage):
                parsed.append(image)
            else:
                parsed.extend(parse_sidekick_images([image]))
        resolved["sidekick_images"] = parsed

    try:
        config = UpgradeConfig(**resolved)
    except PydanticValidationError as e:
        raise ConfigError(
            field=first_error_field(e),
            message="\n".join(flatten_pydantic_errors(e)),
        ) from e

    logger.debug(
        f"Loaded upgrade config for {config.environment}/{config.stack}/"
        f"{config.service} -> {config.image}"
    )
    return config
