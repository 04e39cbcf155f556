"""Module holding constants used across gh-recurse."""

API_BASE = "https://api.github.com"
GITHUB_API_ACCEPT = "application/vnd.github+json"
USER_AGENT = "gh-recurse/0.1"
HTTP_TIMEOUT_SEC = 30
PER_PAGE = 100

TOKEN_ENV = "GITHUB_OAUTH_TOKEN"
ENV_PREFIX = "GH_RECURSE_"
CONFIG_FILE_NAME = ".gh-recurse.yaml"

DEFAULT_CONCURRENCY = 4
DEFAULT_DEST = "."
DEFAULT_SSH_KEY = "~/.ssh/id_rsa"
SSH_USER = "git"
CLONE_HOST = "github.com"

# git's wording when the clone target is already populated
DEST_EXISTS_MARKER = "exists and is not an empty directory"

PASSPHRASE_ENV = "GH_RECURSE_SSH_PASSPHRASE"
