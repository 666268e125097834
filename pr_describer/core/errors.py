"""
Core error classes for the PR Describer application.
"""


class ConfigurationError(Exception):
    """Raised when a required setting (secret, credential, key) is missing or malformed."""

    pass


class GitHubApiError(Exception):
    """Raised when the GitHub REST API answers with an unexpected status."""

    def __init__(self, message: str, status: int | None = None, body: str | None = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message)
