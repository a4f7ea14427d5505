"""
GitLab CI provider implementation.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from config.settings import GITLAB_TOKEN_ENV_VAR, GITLAB_URL_ENV_VAR

from .exceptions import CredentialError, PrivateKeyError
from .gitlab_api import GitLabAPI, determine_gitlab_url
from .state.ci_state import CIState
from .state.environment import CredentialRequest, ProviderEnvironment
from .utils import get_logger
from .variables.operations import VariableOperations


class GitLabCIProvider:
    """
    Manages the configuration of a project to be tested on GitLab CI.

    The provider writes CI variables through the GitLab API and derives the
    dashboard URL and badge for a repository. Errors from the API are not
    handled here: they reach the caller, which owns any retry or recovery.
    """

    SERVICE_NAME = "gitlab-pipelines"

    GITLAB_TOKEN = "GITLAB_TOKEN"
    SSH_PRIVATE_KEY = "SSH_PRIVATE_KEY"

    # Badges always point at this branch, whatever the repository's default is.
    BADGE_BRANCH = "master"

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        api: Optional[GitLabAPI] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the GitLab CI provider.

        Args:
            config: Build-tools configuration, may override the GitLab host
            api: Client to use; if None, one is built by set_credentials()
            logger: Custom logger (if None, one will be created)
        """
        self.config = config or {}
        self.logger = logger or get_logger("GitLabCIProvider")

        self.gitlab_url = determine_gitlab_url(self.config)
        self.environment = ProviderEnvironment(service_name=self.SERVICE_NAME)

        self._api = api

    def get_environment(self) -> ProviderEnvironment:
        return self.environment

    def credential_requests(self) -> List[CredentialRequest]:
        """Credentials this provider needs before it can configure a project."""
        return [
            CredentialRequest(
                id=self.GITLAB_TOKEN,
                instructions=(
                    f"Create a personal access token with the \"api\" scope at "
                    f"https://{self.gitlab_url}/-/user_settings/personal_access_tokens"
                ),
                env_var=GITLAB_TOKEN_ENV_VAR
            )
        ]

    def set_credentials(self, credentials: Mapping[str, str]) -> None:
        """
        Build the API client from the credentials a caller collected.

        Args:
            credentials: Credential values keyed by request id

        Raises:
            CredentialError: If no GitLab token is among them
        """
        token = credentials.get(self.GITLAB_TOKEN)
        if not token:
            raise CredentialError(f"Missing credential {self.GITLAB_TOKEN}")

        self._api = GitLabAPI(token=token, gitlab_url=self.gitlab_url, logger=self.logger)

    def api(self) -> GitLabAPI:
        """
        Get the API client.

        Raises:
            CredentialError: If set_credentials() has not been called
        """
        if self._api is None:
            raise CredentialError("GitLab API used before credentials were set")
        return self._api

    def infer(self, url: str) -> bool:
        """True if the remote URL is hosted on the configured GitLab instance."""
        return self.gitlab_url in url

    def project_url(self, ci_env: CIState) -> str:
        """URL of the project's pipeline dashboard."""
        repository_attributes = ci_env.get_state("repository")
        return f"https://{self.gitlab_url}/{repository_attributes.project_id()}/pipelines"

    def badge(self, ci_env: CIState) -> str:
        """Markdown for the pipeline status badge of this CI service."""
        url = self.project_url(ci_env)
        return f"[![GitLabCI]({url}/badges/{self.BADGE_BRANCH}/pipeline.svg)]({url})"

    def configure_server(self, ci_env: CIState) -> Dict[str, str]:
        """
        Write the CI environment variables to the project's CI/CD settings.

        The GitLab host is added to the aggregate state so that test runs
        resolve the same instance this provider was configured with.

        Args:
            ci_env: State to read the variables and repository from

        Returns:
            The variables that were written
        """
        self.logger.info("Configure GitLab CI")

        variables = dict(ci_env.get_aggregate_state())
        variables[GITLAB_URL_ENV_VAR] = self.gitlab_url

        return self.set_env_vars(ci_env, variables)

    def set_env_vars(self, ci_env: CIState, variables: Mapping[str, str]) -> Dict[str, str]:
        """
        Replace the given variables on the project, delete first then create.

        Empty values are skipped with a warning.

        Raises:
            GitLabAPIError: If a request fails; nothing already done is undone
        """
        project_id = ci_env.get_state("repository").project_id()
        operations = VariableOperations(api=self.api(), logger=self.logger)
        return operations.reconcile(project_id, variables)

    def start_testing(self, ci_env: CIState) -> None:
        # Nothing to trigger: pipelines start on their own.
        pass

    def add_private_key(self, ci_env: CIState, private_key: str) -> Dict[str, str]:
        """
        Store the private key file's contents as the SSH_PRIVATE_KEY variable.

        GitLab CI has no key store, so the key is kept as a CI variable.

        Args:
            ci_env: State to read the repository from
            private_key: Path to the private key file

        Raises:
            OSError: If the key file cannot be read
            PrivateKeyError: If the key file is not valid UTF-8 text
            GitLabAPIError: If a request fails
        """
        with open(private_key, "rb") as key_file:
            raw = key_file.read()

        try:
            contents = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PrivateKeyError(f"Private key {private_key} is not UTF-8 text: {e}") from e

        return self.set_env_vars(ci_env, {self.SSH_PRIVATE_KEY: contents})
