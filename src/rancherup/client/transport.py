"""Rancher v1 API client.

This module provides the RancherClient used by the upgrade workflow to read
environments, stacks and services and to run service actions.
"""

from __future__ import annotations

import logging
import warnings
from types import TracebackType
from typing import Any
from urllib.parse import urlparse

import requests
from requests.exceptions import RequestException
from urllib3.exceptions import InsecureRequestWarning

from rancherup.config.defaults import (
    API_VERSION_PATH,
    COLLECTION_LIMIT,
    REQUEST_TIMEOUT,
)
from rancherup.lib.errors import ConfigError, TransportError, ValidationError
from rancherup.models.rancher import Service, UpgradeRequest

logger = logging.getLogger(__name__)

ACTION_UPGRADE = "upgrade"
ACTION_FINISH_UPGRADE = "finishupgrade"
ACTION_ROLLBACK = "rollback"


class RancherClient:
    """Client for the Rancher v1 REST API.

    Credentials are sent as HTTP basic auth with every request. For https
    servers certificate verification is disabled on this client's session
    only, so self-signed Rancher deployments can be reached; other HTTP
    traffic in the process is not affected.

    Example:
        >>> with RancherClient("http://rancher:8080", "key", "secret") as client:
        ...     projects = client.list_collection("projects")
    """

    def __init__(
        self,
        url: str,
        access_key: str,
        secret_key: str,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize client with server URL and API keys.

        Args:
            url: Rancher server URL (scheme and host, e.g. http://rancher:8080)
            access_key: Environment or account API key
            secret_key: Secret for the API key
            timeout: Request timeout in seconds

        Raises:
            ConfigError: If the URL cannot be parsed or a credential is blank
        """
        url = (url or "").strip()
        try:
            parsed = urlparse(url)
        except ValueError as e:
            raise ConfigError(field="url", message=f"Invalid Rancher URL: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigError(
                field="url",
                message=f"Invalid Rancher URL [{url}], expected e.g. http://rancher:8080",
            )

        access_key = (access_key or "").strip()
        if not access_key:
            raise ConfigError(field="key", message="argument [key] can't be blank")

        secret_key = (secret_key or "").strip()
        if not secret_key:
            raise ConfigError(field="secret", message="argument [secret] can't be blank")

        self.base_url = f"{parsed.scheme}://{parsed.netloc}/{API_VERSION_PATH}"
        self.timeout = timeout
        self.verify_tls = parsed.scheme != "https"

        self._session = requests.Session()
        self._session.auth = (access_key, secret_key)
        self._session.headers.update({"Accept": "application/json"})
        self._session.verify = self.verify_tls

        if not self.verify_tls:
            logger.warning(
                f"TLS certificate verification is disabled for {parsed.netloc}"
            )
        logger.debug(f"Rancher api url [{self.base_url}]")

    def __enter__(self) -> RancherClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def list_collection(self, path: str) -> list[dict[str, Any]]:
        """List items of a Rancher collection.

        Args:
            path: Collection path relative to the API root (e.g. "projects")

        Returns:
            Items of the collection's ``data`` array, in listing order

        Raises:
            TransportError: Network failure, error status or malformed JSON
        """
        url = f"{self.base_url}/{path}"
        logger.debug(f"Fetch list items from [{url}]")
        response = self._request(
            "GET", url, operation="list", params={"limit": COLLECTION_LIMIT}
        )
        data = self._decode(response, operation="list")

        items = data.get("data") if isinstance(data, dict) else None
        if not isinstance(items, list):
            raise TransportError(
                operation="list",
                message=f"Unexpected collection format from [{url}]",
            )
        return [item for item in items if isinstance(item, dict)]

    def fetch_service(self, service: Service) -> Service:
        """Fetch the current representation of a service.

        An unhealthy service is returned normally; callers inspect
        ``health_state`` themselves.

        Args:
            service: Previously resolved service

        Returns:
            Fresh Service snapshot carrying the same environment and stack ids

        Raises:
            ValidationError: If service is None
            TransportError: Network failure, error status or malformed JSON
        """
        _require_service(service)
        url = f"{self.base_url}/projects/{service.env_id}/services/{service.id}"
        response = self._request("GET", url, operation="status")
        data = self._decode(response, operation="status")
        if not isinstance(data, dict):
            raise TransportError(
                operation="status", message=f"Unexpected service format from [{url}]"
            )

        data = {**data, "id": data.get("id") or service.id}
        data["env_id"] = service.env_id
        data["stack_id"] = service.stack_id
        try:
            return Service.model_validate(data)
        except ValueError as e:
            raise TransportError(
                operation="status", message=f"Invalid service payload: {e}"
            ) from e

    def get_service_status(self, service: Service) -> str:
        """Return the service state, or ``unhealthy`` when its health says so."""
        current = self.fetch_service(service)
        if current.is_unhealthy:
            return "unhealthy"
        return current.state

    def post_action(
        self,
        service: Service,
        action: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run an action on a service.

        Args:
            service: Target service
            action: Action name (upgrade, finishupgrade, rollback)
            body: JSON body; an empty object when omitted

        Returns:
            Decoded response body, or an empty dict when it is not JSON

        Raises:
            ValidationError: If service is None
            TransportError: Network failure or error status
        """
        _require_service(service)
        url = f"{self.base_url}/projects/{service.env_id}/services/{service.id}/"
        response = self._request(
            "POST",
            url,
            operation=action,
            params={"action": action},
            json=body if body is not None else {},
        )
        logger.debug(f"Service {action} HttpStatus code = [{response.status_code}]")
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def upgrade_service(self, service: Service, request: UpgradeRequest) -> None:
        """Start an in-service upgrade of a service."""
        if request is None:
            raise ValidationError(
                field="request",
                message="argument [request] can't be null",
                expected="UpgradeRequest",
                actual="None",
            )
        self.post_action(service, ACTION_UPGRADE, request.to_payload())

    def finish_upgrade(self, service: Service) -> None:
        """Mark a completed upgrade as finished."""
        self.post_action(service, ACTION_FINISH_UPGRADE)

    def rollback_upgrade(self, service: Service) -> None:
        """Roll a service back to its pre-upgrade configuration."""
        self.post_action(service, ACTION_ROLLBACK)

    def _request(
        self,
        method: str,
        url: str,
        operation: str,
        params: dict[str, str | int] | None = None,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Execute HTTP request with error handling.

        Raises:
            TransportError: Connection/timeout issues or non-2xx status code
        """
        try:
            with warnings.catch_warnings():
                # Reported once at construction instead of on every request
                if not self.verify_tls:
                    warnings.simplefilter("ignore", InsecureRequestWarning)
                response = self._session.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
        except RequestException as e:
            raise TransportError(
                operation=operation,
                message=f"Unable to reach the Rancher API: {e}",
            ) from e

        if not response.ok:
            detail = _error_detail(response)
            message = f"{method} [{url}] was rejected"
            if detail:
                message += f": {detail}"
            raise TransportError(
                operation=operation,
                message=message,
                status_code=response.status_code,
            )

        return response

    @staticmethod
    def _decode(response: requests.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                operation=operation,
                message=f"Malformed JSON from the Rancher API: {e}",
                status_code=response.status_code,
            ) from e


def _require_service(service: Service | None) -> None:
    if service is None:
        raise ValidationError(
            field="service",
            message="argument [service] can't be null",
            expected="resolved Service",
            actual="None",
        )


def _error_detail(response: requests.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        detail = payload.get("message") or payload.get("code")
        return str(detail) if detail else None
    return None
