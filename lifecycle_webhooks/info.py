"""
Get information about the bot and where it is active.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Dict, List, Optional

import yaml

from lifecycle_webhooks import settings
from lifecycle_webhooks.auth import get_github_session
from lifecycle_webhooks.utils import check_response, memoize, memoize_timed, retry_get

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """The lifecycle configuration isn't shaped the way it should be."""


@dataclasses.dataclass(frozen=True)
class RepoConfigItem:
    """
    One entry of the lifecycle configuration.

    `repos` are "org" or "org/repo" names where the bot is active.
    `excluded_repos` are "org/repo" names carved out of an "org" entry.
    """
    repos: tuple[str, ...]
    excluded_repos: tuple[str, ...] = ()

    # Post a comment when a pull request is closed by command.
    comment_on_pr_close: bool = True

    @classmethod
    def from_dict(cls, data: Dict) -> RepoConfigItem:
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config item should be a mapping, not {data!r}")
        repos = data.get("repos")
        if not isinstance(repos, list) or not repos:
            raise ConfigurationError(f"Config item needs a list of repos: {data!r}")
        excluded = data.get("excluded_repos", [])
        if not isinstance(excluded, list):
            raise ConfigurationError(f"excluded_repos should be a list: {data!r}")
        comment_on_pr_close = data.get("comment_on_pr_close", True)
        if not isinstance(comment_on_pr_close, bool):
            raise ConfigurationError(f"comment_on_pr_close should be true or false: {data!r}")
        return cls(
            repos=tuple(str(r) for r in repos),
            excluded_repos=tuple(str(r) for r in excluded),
            comment_on_pr_close=comment_on_pr_close,
        )


@dataclasses.dataclass(frozen=True)
class LifecycleConfig:
    """Where the lifecycle bot is active, and how it behaves there."""
    config_items: List[RepoConfigItem] = dataclasses.field(default_factory=list)

    @classmethod
    def from_dict(cls, data) -> LifecycleConfig:
        if not isinstance(data, dict) or "config_items" not in data:
            raise ConfigurationError("Lifecycle config needs a top-level 'config_items' key")
        items = data["config_items"]
        if not isinstance(items, list):
            raise ConfigurationError(f"config_items should be a list, not {items!r}")
        return cls([RepoConfigItem.from_dict(item) for item in items])

    def config_for(self, org: str, repo: str) -> Optional[RepoConfigItem]:
        """
        Find the config item for a repo, or None if the bot isn't active there.

        An item naming the repo exactly wins over one naming its org.
        """
        full_name = f"{org}/{repo}"
        for item in self.config_items:
            if full_name in item.repos:
                return item
        for item in self.config_items:
            if org in item.repos and full_name not in item.excluded_repos:
                return item
        return None


def _github_file_url(repo_fullname: str, file_path: str) -> str:
    """Get the GitHub url to retrieve the text of a file."""
    # HEAD is the tip of the repo, whatever the default branch is called.
    return f"https://raw.githubusercontent.com/{repo_fullname}/HEAD/{file_path}"


def read_github_file(repo_fullname: str, file_path: str) -> str:
    """
    Read a GitHub file from the default branch of a repo.

    Arguments:
        `repo_fullname`: the owner and repo to access: ``"octocat/hello-world"``.
        `file_path`: the path to the file within the repo.

    Returns:
        The text of the file.
    """
    url = _github_file_url(repo_fullname, file_path)
    logger.debug(f"Grabbing data file from: {url}")
    resp = get_github_session().get(url)
    resp.raise_for_status()
    return resp.text


# Every comment event needs the configuration, so cache it.
@memoize_timed(minutes=15)
def _read_yaml_data_file(repo_fullname: str, filename: str):
    return yaml.safe_load(read_github_file(repo_fullname, filename))


def get_lifecycle_config() -> LifecycleConfig:
    """Get the lifecycle configuration from its data file."""
    data = _read_yaml_data_file(settings.LIFECYCLE_CONFIG_REPO, settings.LIFECYCLE_CONFIG_FILE)
    return LifecycleConfig.from_dict(data)


@memoize
def github_whoami():
    self_resp = retry_get(get_github_session(), "/user")
    check_response(self_resp)
    return self_resp.json()


def get_bot_username() -> str:
    """What is the username of the bot?"""
    me = github_whoami()
    return me["login"]
