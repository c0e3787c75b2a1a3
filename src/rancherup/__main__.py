"""Allow running the tool with ``python -m rancherup``."""

from rancherup.cli.main import main

if __name__ == "__main__":
    main()
