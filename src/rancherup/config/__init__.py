"""Configuration defaults, loading and validation for upgrade runs.

Main components:
- load_upgrade_config: Build a validated UpgradeConfig from option values
- Environment variable fallback for connection and target options
- Default values and environment variable names
"""
