"""Rolling upgrade workflow for a single Rancher service.

The orchestrator resolves the target service, clears any upgrade left
unfinished by a previous run, submits the new upgrade and then polls the
service until Rancher reports the rollout complete. Depending on the
service health it finishes the upgrade, rolls it back, or leaves it in the
``upgraded`` state for manual inspection.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum

from pydantic import BaseModel, Field

from rancherup.client.transport import (
    ACTION_FINISH_UPGRADE,
    ACTION_ROLLBACK,
    ACTION_UPGRADE,
    RancherClient,
)
from rancherup.config.defaults import POLL_INTERVAL
from rancherup.lib.errors import (
    TransportError,
    UpgradeCancelledError,
    UpgradeTimeoutError,
)
from rancherup.models.config import UpgradeConfig
from rancherup.models.rancher import Service
from rancherup.upgrade.builder import build_upgrade_request
from rancherup.upgrade.clock import Clock, SystemClock
from rancherup.upgrade.locator import ResourceLocator

logger = logging.getLogger(__name__)

STATE_ACTIVE = "active"
STATE_UPGRADED = "upgraded"
STATUS_UNHEALTHY = "unhealthy"


class UpgradeOutcome(str, Enum):
    """How an upgrade run ended."""

    FINISHED = "finished"
    UPGRADED = "upgraded"
    ROLLED_BACK = "rolled_back"
    SUBMITTED = "submitted"


class UpgradeResult(BaseModel):
    """Outcome of a completed upgrade run.

    Attributes:
        outcome: Terminal outcome of the run
        environment: Environment name
        stack: Stack name
        service: Service name
        image: Image the service was upgraded to
        actions: Service actions issued, in order
        status_line: Human-readable status line
        succeeded: Whether the tool run completed; a rollback counts as success
    """

    outcome: UpgradeOutcome
    environment: str
    stack: str
    service: str
    image: str
    actions: list[str] = Field(default_factory=list)
    status_line: str = ""
    succeeded: bool = True

    @property
    def upgrade_applied(self) -> bool:
        """Whether the new image stayed in place (False after a rollback)."""
        return self.outcome != UpgradeOutcome.ROLLED_BACK


class UpgradeOrchestrator:
    """Drive an in-service upgrade to completion or rollback.

    Args:
        client: Rancher API client
        locator: Resource locator (built from the client when omitted)
        clock: Time source for the poll loop
        cancel: Event that aborts any ongoing wait when set
        poll_interval: Seconds between service state checks
    """

    def __init__(
        self,
        client: RancherClient,
        locator: ResourceLocator | None = None,
        clock: Clock | None = None,
        cancel: threading.Event | None = None,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self._client = client
        self._locator = locator or ResourceLocator(client)
        self._clock = clock or SystemClock()
        self._cancel = cancel
        self._poll_interval = poll_interval
        self._actions: list[str] = []

    def run(self, config: UpgradeConfig) -> UpgradeResult:
        """Upgrade the configured service.

        Raises:
            ValidationError: If an input is blank or malformed
            NotFoundError: If the environment, stack or service does not exist
            TransportError: If a resolution, action or decision call fails
            UpgradeTimeoutError: If a blocking wait runs out of time
            UpgradeCancelledError: If the cancel event is set during a wait
        """
        self._actions = []

        env = self._locator.resolve_environment(config.environment)
        stack = self._locator.resolve_stack(env.id, config.stack)
        service = self._locator.resolve_service(env.id, stack.id, config.service)

        if service.state == STATE_UPGRADED:
            logger.info(
                f"Service {service.name} has an unfinished upgrade, finishing it first"
            )
            self._finish(service)
            self.wait_for_state(service, STATE_ACTIVE, config.timeout, "pre-check")

        logger.info(f"Upgrading {stack.name}/{service.name} in environment {env.name}")
        request = build_upgrade_request(
            service,
            batch_size=config.batch_size,
            batch_interval=config.batch_interval,
            start_first=config.start_first,
            image=config.image,
            upgrade_sidekicks=config.upgrade_sidekicks,
            sidekick_images=config.sidekick_images,
        )
        self._client.upgrade_service(service, request)
        self._actions.append(ACTION_UPGRADE)

        if not config.wait:
            return self._result(
                config, UpgradeOutcome.SUBMITTED, "Upgrade submitted"
            )

        try:
            self.wait_for_state(service, STATE_UPGRADED, config.timeout, "converge")
        except UpgradeTimeoutError as e:
            logger.warning(str(e))

        status = self._client.get_service_status(service)

        if status == STATUS_UNHEALTHY:
            logger.warning(f"Service {service.name} is unhealthy, rolling back")
            self._client.rollback_upgrade(service)
            self._actions.append(ACTION_ROLLBACK)
            self.wait_for_state(service, STATE_ACTIVE, config.timeout, "rollback")
            return self._result(
                config, UpgradeOutcome.ROLLED_BACK, "Upgrade rolled back"
            )

        if config.finish_upgrade:
            self._finish(service)
            self.wait_for_state(service, STATE_ACTIVE, config.timeout, "finish")
            return self._result(config, UpgradeOutcome.FINISHED, "Upgrade succeeded")

        return self._result(
            config,
            UpgradeOutcome.UPGRADED,
            "Upgrade succeeded, left in upgraded state",
        )

    def wait_for_state(
        self,
        service: Service,
        target_state: str,
        timeout: int,
        phase: str,
    ) -> None:
        """Poll the service until its status equals ``target_state``.

        Failed status checks are logged and polling continues.

        Raises:
            UpgradeTimeoutError: If ``timeout`` seconds elapse first
            UpgradeCancelledError: If the cancel event is set
        """
        started = self._clock.monotonic()
        last_state: str | None = service.state

        while True:
            if self._clock.sleep(self._poll_interval, self._cancel):
                raise UpgradeCancelledError(phase)

            try:
                state = self._client.get_service_status(service)
            except TransportError as e:
                logger.warning(f"Service status check failed: {e}")
            else:
                last_state = state
                logger.debug(f"Current service state = [{state}]")
                if state == target_state:
                    return

            if self._clock.monotonic() - started >= timeout:
                raise UpgradeTimeoutError(
                    phase=phase,
                    last_state=last_state,
                    target_state=target_state,
                    timeout=timeout,
                )

    def _finish(self, service: Service) -> None:
        self._client.finish_upgrade(service)
        self._actions.append(ACTION_FINISH_UPGRADE)

    def _result(
        self, config: UpgradeConfig, outcome: UpgradeOutcome, message: str
    ) -> UpgradeResult:
        logger.info(message)
        return UpgradeResult(
            outcome=outcome,
            environment=config.environment,
            stack=config.stack,
            service=config.service,
            image=config.image,
            actions=list(self._actions),
            status_line=message,
        )
