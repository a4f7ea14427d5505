"""
Custom exceptions for the GitLab CI provider.
"""

from typing import Optional


class CIProviderError(Exception):
    """Base exception for all CI provider errors."""
    pass

class GitLabAPIError(CIProviderError):
    """Exception raised when there is an error with the GitLab API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

class EnvironmentVariableError(CIProviderError):
    """Exception raised when a required environment variable is missing."""
    pass

class CredentialError(CIProviderError):
    """Exception raised when the GitLab API is used before a token is set."""
    pass

class PrivateKeyError(CIProviderError):
    """Exception raised when a private key file cannot be stored as a variable."""
    pass
