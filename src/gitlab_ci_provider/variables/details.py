"""
CI variable model for the GitLab CI provider.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class Variable:
    """Data class representing a GitLab project CI variable."""
    key: str
    value: str
    # Protected variables only reach protected branches. GitLab masks
    # values either way, so this provider never sets it.
    protected: bool = False

    @classmethod
    def from_api_row(cls, row: dict) -> 'Variable':
        """
        Create a Variable from a row of the GitLab variables listing.

        Args:
            row: Decoded JSON object returned by the API

        Returns:
            Variable instance
        """
        return cls(
            key=row["key"],
            value=row.get("value", ""),
            protected=row.get("protected", False)
        )

    def to_payload(self) -> Dict[str, Any]:
        """Body for the create-variable request."""
        return {"key": self.key, "value": self.value, "protected": self.protected}
