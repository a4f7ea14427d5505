"""
GitLab API interaction.
"""

import json
import logging
from typing import Any, Dict, Mapping, Optional
import urllib.parse
import urllib.request
import urllib.error

from config.settings import (
    DEFAULT_GITLAB_URL,
    DEFAULT_TIMEOUT,
    GITLAB_URL_CONFIG_KEY,
    GITLAB_URL_ENV_VAR,
)

from .utils import get_env_var
from .exceptions import GitLabAPIError

logger = logging.getLogger(__name__)


def determine_gitlab_url(config: Optional[Mapping[str, Any]] = None) -> str:
    """
    Resolve the GitLab host name, honoring overrides for self-hosted instances.

    The config mapping wins over the environment, which wins over the
    default host.

    Args:
        config: Build-tools configuration keyed by dotted names

    Returns:
        Host (and optional path prefix) without scheme, e.g. "gitlab.com"
    """
    if config:
        url = config.get(GITLAB_URL_CONFIG_KEY)
        if url:
            return url
    # An empty override would match every URL in infer().
    return get_env_var(GITLAB_URL_ENV_VAR, DEFAULT_GITLAB_URL) or DEFAULT_GITLAB_URL


class GitLabAPI:
    """
    Thin client for the GitLab REST API v4.

    Failures are raised as GitLabAPIError and never retried; the caller
    decides what to do about them.
    """

    def __init__(
        self,
        token: str,
        gitlab_url: str = DEFAULT_GITLAB_URL,
        timeout: int = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the API client.

        Args:
            token: Personal access token sent as PRIVATE-TOKEN
            gitlab_url: Host of the GitLab instance, without scheme
            timeout: Socket timeout in seconds for each request
            logger: Logger instance
        """
        self.token = token
        self.gitlab_url = gitlab_url
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def api_uri(project_id: str, uri: str) -> str:
        """Build a project-scoped API path; the project id is fully url-encoded."""
        target_project = urllib.parse.quote(str(project_id), safe="")
        return f"/api/v4/projects/{target_project}/{uri}"

    def request(
        self,
        uri: str,
        data: Optional[Dict[str, Any]] = None,
        method: Optional[str] = None
    ) -> Any:
        """
        Send a request to the GitLab API.

        Args:
            uri: Path below the host, starting with "/api/v4"
            data: JSON body; when given the method defaults to POST
            method: HTTP method, overriding the default

        Returns:
            Decoded JSON response, or None for an empty body

        Raises:
            GitLabAPIError: If the API request fails
        """
        if method is None:
            method = "POST" if data else "GET"

        url = f"https://{self.gitlab_url}{uri}"
        body = json.dumps(data).encode() if data else None

        headers = {
            "PRIVATE-TOKEN": self.token,
            "Content-Type": "application/json"
        }

        request = urllib.request.Request(url, data=body, headers=headers, method=method)
        self.logger.debug(f"{method} {url}")

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                payload = response.read()

        except urllib.error.HTTPError as e:
            error_message = f"GitLab API error: {e.code} - {e.reason} ({method} {uri})"
            self.logger.error(error_message)
            raise GitLabAPIError(error_message, status_code=e.code) from e

        except urllib.error.URLError as e:
            error_message = f"Failed to reach GitLab at {self.gitlab_url}: {e.reason}"
            self.logger.error(error_message)
            raise GitLabAPIError(error_message) from e

        except OSError as e:
            error_message = f"Connection to GitLab at {self.gitlab_url} failed: {e} ({method} {uri})"
            self.logger.error(error_message)
            raise GitLabAPIError(error_message) from e

        if not payload:
            return None

        try:
            return json.loads(payload.decode())
        except ValueError as e:
            error_message = f"GitLab returned a non-JSON response ({method} {uri}): {e}"
            self.logger.error(error_message)
            raise GitLabAPIError(error_message) from e
