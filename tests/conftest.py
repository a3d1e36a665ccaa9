"""Automatically run by pytest to set up test infrastructure."""

import re
from pathlib import Path

import pytest
import requests_mock

import lifecycle_webhooks
import lifecycle_webhooks.utils

from . import settings as test_settings
from .fake_github import FakeGitHub


@pytest.fixture
def requests_mocker():
    """Make requests_mock available as a fixture."""
    mocker = requests_mock.Mocker(real_http=False, case_sensitive=True)
    mocker.start()
    try:
        yield mocker
    finally:
        mocker.stop()

# URLs we use to grab data files from GitHub.  We use requests_mock to provide
# canned data during tests.
DATA_REGEX = re.compile(r"https://raw.githubusercontent.com/([^/]+/[^/]+)/HEAD/(.*)")

@pytest.fixture
def fake_repo_data(requests_mocker):
    """A fixture to use local files instead of GitHub-fetched data files."""

    def _repo_data_callback(request, context):
        """Read repo_data data from local data."""
        m = re.fullmatch(DATA_REGEX, request.url)
        assert m, f"{request.url = }"
        repo_data_dir = Path(__file__).parent / "repo_data"
        file_path = repo_data_dir / "/".join(m.groups())
        if file_path.exists():
            return file_path.read_text()
        else:
            context.status_code = 404
            return "No such file"

    requests_mocker.get(DATA_REGEX, text=_repo_data_callback)


def pytest_addoption(parser):
    parser.addoption(
        "--percent-404",
        action="store",
        help="What percent of HTTP GET requests should fail with a 404",
        default="0",
    )


@pytest.fixture(autouse=True)
def settings_for_tests(mocker):
    for name, value in vars(test_settings).items():
        if name.isupper():
            mocker.patch(f"lifecycle_webhooks.settings.{name}", value)

@pytest.fixture
def fake_github(pytestconfig, mocker, requests_mocker, fake_repo_data):
    fraction_404 = float(pytestconfig.getoption("percent_404")) / 100.0
    the_fake_github = FakeGitHub(login="lifecycle-bot", fraction_404=fraction_404)
    the_fake_github.install_mocks(requests_mocker)
    if fraction_404:
        # Make the retry sleep a no-op so it won't slow the tests.
        mocker.patch("lifecycle_webhooks.utils.retry_sleep", lambda x: None)
    return the_fake_github


@pytest.fixture
def app():
    return lifecycle_webhooks.create_app(config="testing")


@pytest.fixture(autouse=True)
def configure_flask_app(app):
    """
    Needed to make the app understand it's running under HTTPS, and have Flask
    initialized properly.
    """
    with app.test_request_context('/', base_url="https://lifecycle-webhooks.example.com"):
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def reset_all_memoized_functions():
    """Clears the values cached by @memoize before each test. Applied automatically."""
    lifecycle_webhooks.utils.clear_memoized_values()
