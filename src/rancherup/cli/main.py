"""Command line entry point for rancher-service-up.

Implements the 'rancher-service-up' command, which upgrades one Rancher
service to a new image and waits for the rollout to finish.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import click

from rancherup import __version__
from rancherup.client.transport import RancherClient
from rancherup.config.defaults import (
    APP_NAME,
    DEFAULT_BATCH_INTERVAL,
    DEFAULT_BATCH_SIZE,
    DEFAULT_ENVIRONMENT,
    DEFAULT_UPGRADE_TIMEOUT,
    ENV_ACCESS_KEY,
    ENV_SECRET_KEY,
    ENV_SERVICE,
    ENV_STACK,
    ENV_URL,
)
from rancherup.config.loader import load_upgrade_config
from rancherup.lib.errors import (
    ConfigError,
    NotFoundError,
    RancherUpError,
    TransportError,
    UpgradeCancelledError,
    UpgradeTimeoutError,
    ValidationError,
)
from rancherup.lib.logging_config import get_logger, setup_logging
from rancherup.models.config import SidekickImage, UpgradeConfig
from rancherup.upgrade.orchestrator import (
    UpgradeOrchestrator,
    UpgradeOutcome,
    UpgradeResult,
)

logger = get_logger(__name__)


class SidekickImageType(click.ParamType):
    """Click parameter type for ``name[:tag]`` sidekick images."""

    name = "image[:tag]"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> SidekickImage:
        if isinstance(value, SidekickImage):
            return value
        try:
            return SidekickImage.parse(str(value))
        except ValueError as e:
            self.fail(str(e), param, ctx)


@contextmanager
def handle_upgrade_errors() -> Generator[None, None, None]:
    """Context manager for consistent error handling in the upgrade command.

    Exit codes:
        2: Configuration or validation error
        3: Upgrade error (not found, API failure, timeout, cancelled)
    """
    try:
        yield
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.secho("Error: Configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except ValidationError as e:
        logger.error(f"Validation error: {e}")
        click.secho("Error: Invalid input", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except NotFoundError as e:
        logger.error(f"Resource not found: {e}")
        click.secho(f"Error: {e.kind} not found", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)
    except TransportError as e:
        logger.error(f"Rancher API error: {e}")
        click.secho(f"Error: {e.operation} failed", fg="red", err=True)
        click.echo(f"  {e}", err=True)
        sys.exit(3)
    except (UpgradeTimeoutError, UpgradeCancelledError) as e:
        logger.error(f"Upgrade error: {e}")
        click.secho(f"Error: {e.phase} did not complete", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)
    except RancherUpError as e:
        logger.error(f"Upgrade error: {e}")
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(3)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(3)


@click.command(name="rancher-service-up")
@click.option(
    "--url",
    type=str,
    default=None,
    help=f"The URL for your Rancher server, eg: http://rancher:8080. [{ENV_URL}]",
)
@click.option(
    "--key",
    type=str,
    default=None,
    help=f"The environment or account API key. [{ENV_ACCESS_KEY}]",
)
@click.option(
    "--secret",
    type=str,
    default=None,
    help=f"The secret for the access API key. [{ENV_SECRET_KEY}]",
)
@click.option(
    "--env",
    "environment",
    type=str,
    default=DEFAULT_ENVIRONMENT,
    show_default=True,
    help="The name of the environment in Rancher.",
)
@click.option(
    "--stack",
    type=str,
    default=None,
    help=f"The name of the stack in Rancher. [{ENV_STACK}]",
)
@click.option(
    "--service",
    type=str,
    default=None,
    help=f"The name of the service in Rancher to upgrade. [{ENV_SERVICE}]",
)
@click.option(
    "--image",
    type=str,
    default=None,
    help="The new image[:tag] of the service in Rancher to upgrade.",
)
@click.option(
    "--start-first",
    is_flag=True,
    help="Should Rancher start new containers before stopping the old ones.",
)
@click.option(
    "--batch-size",
    type=int,
    default=DEFAULT_BATCH_SIZE,
    show_default=True,
    help="Number of containers to upgrade at once.",
)
@click.option(
    "--batch-interval",
    type=int,
    default=DEFAULT_BATCH_INTERVAL,
    show_default=True,
    help="Number of seconds to wait between upgrade batches.",
)
@click.option(
    "--upgrade-timeout",
    type=int,
    default=DEFAULT_UPGRADE_TIMEOUT,
    show_default=True,
    help="How long to wait, in seconds, for the upgrade to finish before exiting.",
)
@click.option(
    "--wait-for-upgrade-to-finish/--no-wait-for-upgrade-to-finish",
    "wait",
    default=True,
    show_default=True,
    help="Wait for Rancher to finish the upgrade before this tool exits.",
)
@click.option(
    "--finish-upgrade/--no-finish-upgrade",
    default=True,
    show_default=True,
    help="Mark the upgrade as finished after it completes.",
)
@click.option(
    "--upgrade-sidekicks",
    is_flag=True,
    help="Upgrade service sidekicks at the same time.",
)
@click.option(
    "--new-sidekick-image",
    "sidekick_images",
    type=SidekickImageType(),
    multiple=True,
    help="Replace the sidekick image[:tag] with this one during the upgrade.",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print the upgrade outcome.",
)
@click.version_option(
    __version__,
    prog_name=APP_NAME,
    message="%(prog)s version: %(version)s",
)
def main(
    url: str | None,
    key: str | None,
    secret: str | None,
    environment: str,
    stack: str | None,
    service: str | None,
    image: str | None,
    start_first: bool,
    batch_size: int,
    batch_interval: int,
    upgrade_timeout: int,
    wait: bool,
    finish_upgrade: bool,
    upgrade_sidekicks: bool,
    sidekick_images: tuple[SidekickImage, ...],
    debug: bool,
    quiet: bool,
) -> None:
    """Upgrade a Rancher service to a new image.

    Starts an in-service upgrade, waits for Rancher to roll it out, then
    finishes it, or rolls it back when the service turns unhealthy.

    Example:

        rancher-service-up --stack web --service api --image org/api:1.2.3

        rancher-service-up --stack web --service api --image org/api:1.2.3
        --upgrade-sidekicks --new-sidekick-image org/nginx
    """
    setup_logging(verbose=debug, quiet=quiet)

    with handle_upgrade_errors():
        config = load_upgrade_config(
            {
                "url": url,
                "access_key": key,
                "secret_key": secret,
                "environment": environment,
                "stack": stack,
                "service": service,
                "image": image,
                "start_first": start_first,
                "batch_size": batch_size,
                "batch_interval": batch_interval,
                "timeout": upgrade_timeout,
                "wait": wait,
                "finish_upgrade": finish_upgrade,
                "upgrade_sidekicks": upgrade_sidekicks,
                "sidekick_images": list(sidekick_images),
            }
        )

        if not quiet:
            _display_configuration(config)

        with RancherClient(config.url, config.access_key, config.secret_key) as client:
            result = UpgradeOrchestrator(client).run(config)

        _display_result(result, quiet)


def _display_configuration(config: UpgradeConfig) -> None:
    click.echo()
    click.secho("Upgrade Configuration:", bold=True)
    click.echo(f"  Environment: {config.environment}")
    click.echo(f"  Stack:       {config.stack}")
    click.echo(f"  Service:     {config.service}")
    click.echo(f"  Image:       {config.image}")
    click.echo(f"  Batch:       {config.batch_size} every {config.batch_interval}s")
    if config.sidekick_images:
        sidekicks = ", ".join(str(image) for image in config.sidekick_images)
        click.echo(f"  Sidekicks:   {sidekicks}")
    click.echo()


def _display_result(result: UpgradeResult, quiet: bool) -> None:
    """Display the upgrade outcome.

    Args:
        result: Result of the upgrade run
        quiet: If True, only print the outcome keyword
    """
    if quiet:
        click.echo(result.outcome.value)
        return

    color = "yellow" if result.outcome == UpgradeOutcome.ROLLED_BACK else "green"
    click.secho(result.status_line, fg=color, bold=True)
    click.echo(f"  Service:   {result.stack}/{result.service}")
    click.echo(f"  Image:     {result.image}")
    click.echo(f"  Actions:   {', '.join(result.actions)}")
    click.echo()
