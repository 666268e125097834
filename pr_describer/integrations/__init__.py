"""
Integrations for external services and APIs.

This package contains integrations for GitHub and for the language model
providers used to draft pull request descriptions.
"""
