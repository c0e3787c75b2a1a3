"""Default values for rancher-service-up runs."""

APP_NAME = "Rancher service upgrade tool"

# Environment variables consulted when an option is not given
ENV_URL = "RANCHER_URL"
ENV_ACCESS_KEY = "RANCHER_ACCESS_KEY"
ENV_SECRET_KEY = "RANCHER_SECRET_KEY"
ENV_STACK = "CI_PROJECT_NAMESPACE"
ENV_SERVICE = "CI_PROJECT_NAME"

DEFAULT_ENVIRONMENT = "Default"
DEFAULT_BATCH_SIZE = 1
DEFAULT_BATCH_INTERVAL = 2  # seconds
DEFAULT_UPGRADE_TIMEOUT = 3 * 60  # seconds

# Rancher API
API_VERSION_PATH = "v1"
COLLECTION_LIMIT = 1000
REQUEST_TIMEOUT = 30.0  # seconds
POLL_INTERVAL = 2  # seconds between service state checks
IMAGE_PREFIX = "docker:"
