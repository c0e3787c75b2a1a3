"""rancher-service-up - Rolling upgrades of Rancher services from CI pipelines.

Upgrades a single service of a Rancher (v1 API) stack to a new image, waits
for the rollout, then finishes it or rolls it back depending on the service
health.

Main features:
- Resolve environment, stack and service by name
- In-service upgrades with batch size, interval and start-first control
- Optional sidekick upgrades with per-sidekick image overrides
- Automatic finish, or rollback when the service turns unhealthy
"""

from rancherup.lib.errors import (
    ConfigError,
    NotFoundError,
    RancherUpError,
    TransportError,
    UpgradeCancelledError,
    UpgradeTimeoutError,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "ConfigError",
    "NotFoundError",
    "RancherUpError",
    "TransportError",
    "UpgradeCancelledError",
    "UpgradeTimeoutError",
    "ValidationError",
]
