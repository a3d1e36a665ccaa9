"""Tests of info.py: where the bot is active, and who it is."""

import pytest

from lifecycle_webhooks.info import (
    ConfigurationError,
    LifecycleConfig,
    RepoConfigItem,
    get_bot_username,
    get_lifecycle_config,
)


def test_get_lifecycle_config(fake_github):
    config = get_lifecycle_config()
    assert isinstance(config, LifecycleConfig)
    assert config.config_items[0] == RepoConfigItem(
        repos=("an-org",),
        excluded_repos=("an-org/private-repo",),
        comment_on_pr_close=True,
    )


def test_lifecycle_config_is_cached(fake_github, requests_mocker):
    get_lifecycle_config()
    get_lifecycle_config()
    data_reqs = [r for r in requests_mocker.request_history if r.hostname == "raw.githubusercontent.com"]
    assert len(data_reqs) == 1


@pytest.mark.parametrize("org, repo, expected", [
    # Org-level entry.
    ("an-org", "a-repo", 0),
    ("an-org", "another-repo", 0),
    # Excluded from the org-level entry.
    ("an-org", "private-repo", None),
    # An exact entry beats the org entry.
    ("an-org", "special-repo", 3),
    # Repo-level entries only.
    ("other-org", "quiet-repo", 1),
    ("other-org", "a-repo", 2),
    ("other-org", "elsewhere", None),
    ("nobody", "a-repo", None),
])
def test_config_for(fake_github, org, repo, expected):
    config = get_lifecycle_config()
    item = config.config_for(org, repo)
    if expected is None:
        assert item is None
    else:
        assert item is config.config_items[expected]


def test_comment_on_pr_close_flag(fake_github):
    config = get_lifecycle_config()
    assert config.config_for("an-org", "a-repo").comment_on_pr_close
    assert not config.config_for("other-org", "quiet-repo").comment_on_pr_close


def test_empty_config():
    assert LifecycleConfig.from_dict({"config_items": []}).config_for("an-org", "a-repo") is None


@pytest.mark.parametrize("data", [
    None,
    [],
    {"repos": ["an-org"]},
    {"config_items": {"repos": ["an-org"]}},
    {"config_items": ["an-org"]},
    {"config_items": [{"excluded_repos": ["an-org/a-repo"]}]},
    {"config_items": [{"repos": "an-org"}]},
    {"config_items": [{"repos": []}]},
    {"config_items": [{"repos": ["an-org"], "excluded_repos": "an-org/a-repo"}]},
    {"config_items": [{"repos": ["an-org"], "comment_on_pr_close": "false"}]},
    {"config_items": [{"repos": ["an-org"], "comment_on_pr_close": None}]},
    {"config_items": [{"repos": ["an-org"], "comment_on_pr_close": 0}]},
])
def test_bad_config_shapes(data):
    with pytest.raises(ConfigurationError):
        LifecycleConfig.from_dict(data)


def test_bad_config_file(fake_github, mocker):
    mocker.patch("lifecycle_webhooks.settings.LIFECYCLE_CONFIG_FILE", "bad-lifecycle.yaml")
    with pytest.raises(ConfigurationError, match="config_items"):
        get_lifecycle_config()


def test_missing_config_file(fake_github, mocker):
    mocker.patch("lifecycle_webhooks.settings.LIFECYCLE_CONFIG_FILE", "nope.yaml")
    with pytest.raises(Exception, match="404"):
        get_lifecycle_config()


def test_get_bot_username(fake_github):
    assert get_bot_username() == "lifecycle-bot"
    assert get_bot_username() == "lifecycle-bot"
    assert fake_github.requests_made("/user") == [("/user", "GET")]


def test_comment_on_pr_close_must_be_a_boolean():
    item = {"repos": ["an-org"], "comment_on_pr_close": "no"}
    with pytest.raises(ConfigurationError, match="comment_on_pr_close"):
        LifecycleConfig.from_dict({"config_items": [item]})
    item["comment_on_pr_close"] = False
    config = LifecycleConfig.from_dict({"config_items": [item]})
    assert config.config_for("an-org", "a-repo").comment_on_pr_close is False
