"""Command line interface for rancher-service-up."""
