"""
Variable operations for the GitLab CI provider.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from ..gitlab_api import GitLabAPI
from .details import Variable


class VariableOperations:
    """
    Reconciles a project's CI variables with a desired key/value set.

    GitLab has no upsert for project variables, so every key about to be
    written is deleted first and then created again. Nothing here is
    transactional: if a create fails after its delete went through, the
    variable stays missing until the next successful run.
    """

    def __init__(
        self,
        api: GitLabAPI,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the variable operations.

        Args:
            api: Client used for every request
            logger: Logger instance
        """
        self.api = api
        self.logger = logger or logging.getLogger(__name__)

    def list_variables(self, project_id: str) -> List[Variable]:
        """
        Get the variables currently defined on the project.

        Only the first page the API returns is read.

        Args:
            project_id: Project path or numeric id

        Returns:
            List of Variable objects
        """
        rows = self.api.request(self._variables_uri(project_id)) or []
        return [Variable.from_api_row(row) for row in rows]

    @staticmethod
    def find_intersecting(existing: Iterable[Variable], desired: Mapping[str, str]) -> List[str]:
        """Keys of existing variables that are about to be written."""
        return [variable.key for variable in existing if variable.key in desired]

    def delete_existing(self, project_id: str, desired: Mapping[str, str]) -> List[str]:
        """
        Delete every existing variable whose key is in the desired set.

        Returns:
            The deleted keys
        """
        uri = self._variables_uri(project_id)
        intersecting = self.find_intersecting(self.list_variables(project_id), desired)

        for key in intersecting:
            self.logger.debug(f"Deleting variable {key}")
            self.api.request(f"{uri}/{key}", method="DELETE")

        return intersecting

    def create_variable(self, project_id: str, variable: Variable) -> None:
        self.logger.debug(f"Creating variable {variable.key}")
        self.api.request(self._variables_uri(project_id), variable.to_payload())

    def reconcile(self, project_id: str, desired: Mapping[str, str]) -> Dict[str, str]:
        """
        Bring the project's variables in line with the desired values.

        Args:
            project_id: Project path or numeric id
            desired: Variable values keyed by name

        Returns:
            The variables that were actually written

        Raises:
            GitLabAPIError: If any request fails; earlier changes are kept
        """
        self.delete_existing(project_id, desired)

        written = {}
        for key, value in desired.items():
            if not value:
                self.logger.warning(f"Variable {key} empty: skipping.")
                continue

            self.create_variable(project_id, Variable(key=key, value=value))
            written[key] = value

        return written

    @staticmethod
    def _variables_uri(project_id: str) -> str:
        return GitLabAPI.api_uri(project_id, "variables")
