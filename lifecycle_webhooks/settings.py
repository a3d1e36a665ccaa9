"""Settings for how the webhook should behave."""

import os


GITHUB_PERSONAL_TOKEN = os.environ.get("GITHUB_PERSONAL_TOKEN", None)

# The repo holding the data file that says where the bot is active.
# This should be in the form of org/repo.
LIFECYCLE_CONFIG_REPO = os.environ.get("LIFECYCLE_CONFIG_REPO", "lifecycle-bot/lifecycle-webhooks-data")

# The name of the configuration file in LIFECYCLE_CONFIG_REPO.
LIFECYCLE_CONFIG_FILE = os.environ.get("LIFECYCLE_CONFIG_FILE", "lifecycle.yaml")

# Credentials for the operator views, like /github/process_comment.
# Those views refuse everyone if these aren't set.
HTTP_BASIC_AUTH_USERNAME = os.environ.get("HTTP_BASIC_AUTH_USERNAME", None)
HTTP_BASIC_AUTH_PASSWORD = os.environ.get("HTTP_BASIC_AUTH_PASSWORD", None)
