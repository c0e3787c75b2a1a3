"""Custom exception hierarchy for rancher-service-up configuration and operations."""


class RancherUpError(Exception):
    """Base exception for all rancher-service-up errors.

    All tool-specific exceptions inherit from this class, enabling
    centralized exception handling at the command line boundary.
    """

    pass


class ConfigError(RancherUpError):
    """Exception raised for configuration errors.

    Raised when run options are missing or malformed, including when the
    Rancher client cannot be constructed from the supplied URL and keys.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class ValidationError(RancherUpError):
    """Exception raised when an argument to an upgrade operation is invalid.

    Provides detailed information about what was expected versus what was
    received. Validation errors are never retried.

    Attributes:
        field: The argument that failed validation
        message: Description of the validation failure
        expected: Human description of expected value/type
        actual: The actual value that failed validation
    """

    def __init__(
        self,
        field: str,
        message: str,
        expected: str,
        actual: str,
    ) -> None:
        """Initialize ValidationError with detailed information.

        Args:
            field: Argument that failed validation
            message: Description of what went wrong
            expected: Human-readable description of expected value
            actual: The actual value that failed
        """
        self.field = field
        self.message = message
        self.expected = expected
        self.actual = actual
        full_message = (
            f"Validation error in '{field}': {message}\n"
            f"  Expected: {expected}\n"
            f"  Got: {actual}"
        )
        super().__init__(full_message)


class NotFoundError(RancherUpError):
    """Exception raised when a named Rancher resource cannot be resolved.

    Attributes:
        kind: Resource kind searched for (environment, stack, service)
        name: The name that was searched
        message: Human-readable error message
    """

    def __init__(self, kind: str, name: str) -> None:
        """Create a not-found error for a resource kind and name."""
        self.kind = kind
        self.name = name
        self.message = (
            f"{kind.capitalize()} [{name}] doesn't exist in Rancher, "
            "or your API credentials don't have access to it"
        )
        super().__init__(self.message)


class TransportError(RancherUpError):
    """Exception raised when a call to the Rancher API fails.

    Covers connection failures, non-success HTTP status codes and
    undecodable response bodies.

    Attributes:
        operation: The API operation that failed (e.g. "list", "upgrade")
        message: Human-readable error message
        status_code: HTTP status code, when a response was received
    """

    def __init__(
        self,
        operation: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize TransportError with operation, message and status code.

        Args:
            operation: The API operation that failed
            message: Descriptive error message
            status_code: HTTP status code returned by the server, if any
        """
        self.operation = operation
        self.message = message
        self.status_code = status_code
        full_message = f"Rancher API {operation} failed: {message}"
        if status_code is not None:
            full_message += f" (HTTP {status_code})"
        super().__init__(full_message)


class UpgradeTimeoutError(RancherUpError):
    """Exception raised when a service never reaches the awaited state.

    Attributes:
        phase: Upgrade phase that was waiting (pre-check, converge, finish, rollback)
        last_state: Last state observed on the service, if any
        target_state: The state that was awaited
        timeout: Wait budget in seconds
    """

    def __init__(
        self,
        phase: str,
        last_state: str | None,
        target_state: str,
        timeout: int,
    ) -> None:
        """Create a timeout error describing the last and awaited states."""
        self.phase = phase
        self.last_state = last_state
        self.target_state = target_state
        self.timeout = timeout
        self.message = (
            f"Timed out after {timeout}s during {phase}: current service state "
            f"[{last_state or 'unknown'}], but it needs to be '{target_state}'"
        )
        super().__init__(self.message)


class UpgradeCancelledError(RancherUpError):
    """Exception raised when a wait is cancelled through the cancel signal."""

    def __init__(self, phase: str) -> None:
        """Create a cancellation error for the given phase."""
        self.phase = phase
        self.message = f"Wait cancelled during {phase}"
        super().__init__(self.message)
