"""Rancher API client."""

from rancherup.client.transport import RancherClient

__all__ = ["RancherClient"]
