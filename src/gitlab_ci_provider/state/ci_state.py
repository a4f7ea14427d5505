"""
CI environment state consumed by the GitLab CI provider.
"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class RepositoryAttributes:
    """Repository a pipeline is configured for."""
    project: str
    service: str = "gitlab"

    def project_id(self) -> str:
        """Project path or numeric id, e.g. "group/project"."""
        return self.project

    def service_name(self) -> str:
        return self.service

    def environment_variables(self) -> Dict[str, str]:
        return {}


@dataclass
class VariableState:
    """Free-form key/value pairs destined to become CI variables."""
    variables: Dict[str, str] = field(default_factory=dict)

    def environment_variables(self) -> Dict[str, str]:
        return dict(self.variables)


@dataclass
class CIState:
    """
    Provider-agnostic record of build configuration.

    Holds named state objects; any of them exposing environment_variables()
    contributes to the aggregate state. The provider only reads from it.
    """
    states: Dict[str, Any] = field(default_factory=dict)

    def get_state(self, name: str) -> Any:
        """
        Get a named state object.

        Raises:
            KeyError: If no state was stored under that name
        """
        return self.states[name]

    def set_state(self, name: str, state: Any) -> None:
        self.states[name] = state

    def get_aggregate_state(self) -> Dict[str, str]:
        """
        Merge the variables of every state object, in insertion order.

        Returns:
            A new dict; changing it does not touch the stored state
        """
        aggregate = {}
        for state in self.states.values():
            contribute = getattr(state, "environment_variables", None)
            if contribute is not None:
                aggregate.update(contribute())
        return aggregate
