"""
PR Describer: drafts pull request descriptions from GitHub webhook events.
"""
