"""
Language model agents.

Currently a single agent drafts pull request descriptions from diff summaries.
"""

from pr_describer.agents.description_agent import PRDescriptionAgent

__all__ = ["PRDescriptionAgent"]
