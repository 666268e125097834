"""
GitHub API adapter.

This package provides integrations for GitHub API interactions.
"""

from pr_describer.integrations.github.api import GitHubClient, github_client

__all__ = [
    "GitHubClient",
    "github_client",
]
