"""Pydantic models for Rancher resources and upgrade configuration."""
