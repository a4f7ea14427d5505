"""
Shared fixtures for the GitLab CI provider tests.
"""

import pytest
from unittest.mock import MagicMock

from gitlab_ci_provider.exceptions import GitLabAPIError
from gitlab_ci_provider.provider import GitLabCIProvider
from gitlab_ci_provider.state.ci_state import CIState, RepositoryAttributes, VariableState


class FakeGitLabAPI:
    """In-memory stand-in for the variables endpoints of one project."""

    def __init__(self, variables=None):
        self.variables = dict(variables or {})
        self.calls = []
        self.fail_on = set()

    def request(self, uri, data=None, method=None):
        if method is None:
            method = "POST" if data else "GET"
        self.calls.append((method, uri, data))

        if method == "GET":
            return [
                {"key": key, "value": value, "protected": False}
                for key, value in self.variables.items()
            ]

        if method == "DELETE":
            key = uri.rsplit("/", 1)[-1]
            if ("DELETE", key) in self.fail_on:
                raise GitLabAPIError("GitLab API error: 500 - Internal Server Error", 500)
            if key not in self.variables:
                raise GitLabAPIError("GitLab API error: 404 - Not Found", 404)
            del self.variables[key]
            return None

        if ("POST", data["key"]) in self.fail_on:
            raise GitLabAPIError("GitLab API error: 500 - Internal Server Error", 500)
        if data["key"] in self.variables:
            raise GitLabAPIError("GitLab API error: 400 - Bad Request", 400)
        self.variables[data["key"]] = data["value"]
        return {"key": data["key"], "value": data["value"], "protected": data["protected"]}

    def methods(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def clean_env(monkeypatch):
    """Make sure no GitLab host override leaks in from the environment."""
    monkeypatch.delenv("TERMINUS_BUILD_TOOLS_PROVIDER_GIT_GITLAB_URL", raising=False)
    monkeypatch.delenv("GITLAB_TOKEN", raising=False)


@pytest.fixture
def fake_api():
    return FakeGitLabAPI()


@pytest.fixture
def ci_env():
    """CI state for the project "org/repo" with one extra variable."""
    return CIState(states={
        "repository": RepositoryAttributes(project="org/repo"),
        "variables": VariableState(variables={"TERMINUS_SITE": "my-site"}),
    })


@pytest.fixture
def provider(clean_env, fake_api):
    """Create a GitLabCIProvider backed by the fake API."""
    provider = GitLabCIProvider(api=fake_api)

    # Mock the logger to prevent output during tests
    provider.logger = MagicMock()

    return provider
