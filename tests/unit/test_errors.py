"""Tests for custom exception hierarchy in rancherup.lib.errors."""

import pytest

from rancherup.lib.errors import (
    ConfigError,
    NotFoundError,
    RancherUpError,
    TransportError,
    UpgradeCancelledError,
    UpgradeTimeoutError,
    ValidationError,
)


class TestRancherUpError:
    """Tests for base RancherUpError exception."""

    def test_creates_with_message(self) -> None:
        """Test that RancherUpError can be created with a message."""
        error = RancherUpError("Test error message")
        assert str(error) == "Test error message"

    @pytest.mark.parametrize(
        "error",
        [
            ConfigError("url", "bad"),
            ValidationError("image", "blank", "image", "''"),
            NotFoundError("service", "api"),
            TransportError("list", "down"),
            UpgradeTimeoutError("converge", "upgrading", "upgraded", 10),
            UpgradeCancelledError("converge"),
        ],
    )
    def test_all_errors_share_base(self, error: Exception) -> None:
        """Test that every tool error is a RancherUpError."""
        assert isinstance(error, RancherUpError)


class TestConfigError:
    """Tests for ConfigError exception."""

    def test_formats_message_with_field(self) -> None:
        """Test that ConfigError formats messages with field information."""
        error = ConfigError("url", "Required Rancher URL")
        assert str(error) == "Configuration error in 'url': Required Rancher URL"
        assert error.field == "url"
        assert error.message == "Required Rancher URL"


class TestValidationError:
    """Tests for ValidationError exception."""

    def test_includes_expected_and_actual(self) -> None:
        """Test that ValidationError shows expected and received values."""
        error = ValidationError(
            "image", "argument [image] can't be blank", "docker image[:tag]", "''"
        )
        assert "Validation error in 'image'" in str(error)
        assert "Expected: docker image[:tag]" in str(error)
        assert "Got: ''" in str(error)


class TestNotFoundError:
    """Tests for NotFoundError exception."""

    def test_names_resource(self) -> None:
        """Test that the searched name and kind are kept."""
        error = NotFoundError("stack", "web")
        assert error.kind == "stack"
        assert error.name == "web"
        assert str(error).startswith("Stack [web] doesn't exist in Rancher")


class TestTransportError:
    """Tests for TransportError exception."""

    def test_message_with_status_code(self) -> None:
        """Test that the HTTP status code is part of the message."""
        error = TransportError("upgrade", "rejected", status_code=409)
        assert str(error) == "Rancher API upgrade failed: rejected (HTTP 409)"
        assert error.status_code == 409

    def test_message_without_status_code(self) -> None:
        """Test network errors carry no status code."""
        error = TransportError("list", "connection refused")
        assert str(error) == "Rancher API list failed: connection refused"
        assert error.status_code is None


class TestUpgradeTimeoutError:
    """Tests for UpgradeTimeoutError exception."""

    def test_reports_states(self) -> None:
        """Test that last and awaited states are reported."""
        error = UpgradeTimeoutError("rollback", "unhealthy", "active", 180)
        assert "rollback" in str(error)
        assert "[unhealthy]" in str(error)
        assert "'active'" in str(error)

    def test_unknown_last_state(self) -> None:
        """Test a missing last state is shown as unknown."""
        error = UpgradeTimeoutError("converge", None, "upgraded", 10)
        assert "[unknown]" in str(error)
