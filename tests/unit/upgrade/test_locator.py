"""Unit tests for Rancher resource name resolution."""

from __future__ import annotations

import pytest

from rancherup.lib.errors import NotFoundError, TransportError, ValidationError
from rancherup.upgrade.locator import ResourceLocator
from tests.fakes import (
    ENV_ID,
    SERVICES_PATH,
    STACK_ID,
    FakeRancherClient,
    make_collections,
    make_service_item,
)


@pytest.fixture
def client() -> FakeRancherClient:
    """Provide a fake client serving Default/web/api."""
    return FakeRancherClient(make_collections())


@pytest.fixture
def locator(client: FakeRancherClient) -> ResourceLocator:
    """Provide a locator bound to the fake client."""
    return ResourceLocator(client)  # type: ignore[arg-type]


class TestResolveEnvironment:
    """Tests for resolve_environment."""

    def test_resolves_by_exact_name(self, locator: ResourceLocator) -> None:
        """The matching project id is returned."""
        env = locator.resolve_environment("Default")

        assert env.id == ENV_ID
        assert env.name == "Default"

    def test_name_match_is_case_sensitive(self, locator: ResourceLocator) -> None:
        """A differently cased name does not match."""
        with pytest.raises(NotFoundError) as exc_info:
            locator.resolve_environment("default")

        assert exc_info.value.kind == "environment"
        assert exc_info.value.name == "default"

    def test_first_duplicate_wins(self, client: FakeRancherClient) -> None:
        """With duplicate names the first listed item is returned."""
        client.collections["projects"] = [
            {"id": "1a7", "name": "Default"},
            {"id": "1a8", "name": "Default"},
        ]

        env = ResourceLocator(client).resolve_environment("Default")  # type: ignore[arg-type]

        assert env.id == "1a7"

    @pytest.mark.parametrize("name", ["", "  "])
    def test_blank_name_fails_before_listing(
        self, client: FakeRancherClient, locator: ResourceLocator, name: str
    ) -> None:
        """Blank names never reach the API."""
        with pytest.raises(ValidationError):
            locator.resolve_environment(name)

        assert client.list_calls == []


class TestResolveStack:
    """Tests for resolve_stack."""

    def test_resolves_within_environment(
        self, client: FakeRancherClient, locator: ResourceLocator
    ) -> None:
        """Stacks are listed under the environment."""
        stack = locator.resolve_stack(ENV_ID, "web")

        assert stack.id == STACK_ID
        assert stack.env_id == ENV_ID
        assert client.list_calls == [f"projects/{ENV_ID}/environments"]

    def test_missing_stack_raises(self, locator: ResourceLocator) -> None:
        """An unknown stack name raises NotFoundError with the name."""
        with pytest.raises(NotFoundError, match="Stack \\[api-stack\\]"):
            locator.resolve_stack(ENV_ID, "api-stack")

    def test_blank_env_id_raises(
        self, client: FakeRancherClient, locator: ResourceLocator
    ) -> None:
        """A blank environment id is rejected."""
        with pytest.raises(ValidationError, match="env_id"):
            locator.resolve_stack(" ", "web")

        assert client.list_calls == []


class TestResolveService:
    """Tests for resolve_service."""

    def test_resolves_service_snapshot(self, locator: ResourceLocator) -> None:
        """The service carries its scope ids and launch configuration."""
        service = locator.resolve_service(ENV_ID, STACK_ID, "api")

        assert service.id == "1s42"
        assert service.env_id == ENV_ID
        assert service.stack_id == STACK_ID
        assert service.state == "active"
        assert service.health_state == "healthy"
        assert service.launch_config.image_uuid == "docker:api:1.2.2"

    def test_null_secondary_configs_become_empty(
        self, client: FakeRancherClient, locator: ResourceLocator
    ) -> None:
        """Rancher may send null for services without sidekicks."""
        client.collections[SERVICES_PATH] = [
            make_service_item(secondaryLaunchConfigs=None)
        ]

        service = locator.resolve_service(ENV_ID, STACK_ID, "api")

        assert service.secondary_launch_configs == []

    def test_malformed_service_item_raises_transport_error(
        self, client: FakeRancherClient, locator: ResourceLocator
    ) -> None:
        """A service item that does not parse is reported as an API error."""
        client.collections[SERVICES_PATH] = [
            make_service_item(state=None)  # type: ignore[arg-type]
        ]

        with pytest.raises(TransportError, match=r"service \[api\]") as exc_info:
            locator.resolve_service(ENV_ID, STACK_ID, "api")

        assert exc_info.value.operation == "list"

    @pytest.mark.parametrize(
        "env_id,stack_id,name",
        [("", STACK_ID, "api"), (ENV_ID, "", "api"), (ENV_ID, STACK_ID, "")],
    )
    def test_blank_inputs_raise(
        self,
        client: FakeRancherClient,
        locator: ResourceLocator,
        env_id: str,
        stack_id: str,
        name: str,
    ) -> None:
        """Every argument must be non-blank."""
        with pytest.raises(ValidationError):
            locator.resolve_service(env_id, stack_id, name)

        assert client.list_calls == []

    def test_list_failure_propagates(self, locator: ResourceLocator) -> None:
        """TransportError from the listing is not converted."""

        def fail(path: str) -> list[dict[str, object]]:
            raise TransportError(operation="list", message="boom", status_code=503)

        locator._client.list_collection = fail  # type: ignore[method-assign]

        with pytest.raises(TransportError) as exc_info:
            locator.resolve_service(ENV_ID, STACK_ID, "api")

        assert exc_info.value.status_code == 503

    def test_each_call_lists_again(
        self, client: FakeRancherClient, locator: ResourceLocator
    ) -> None:
        """Results are not cached between calls."""
        locator.resolve_service(ENV_ID, STACK_ID, "api")
        locator.resolve_service(ENV_ID, STACK_ID, "api")

        assert client.list_calls == [SERVICES_PATH, SERVICES_PATH]
