"""
Prompt templates for the PR Description Agent.
"""


def create_description_prompt(diff_summary: str) -> str:
    """Create the prompt asking for a pull request description."""
    return f"""
Analyze the following PR diff and generate a concise, professional description.
The description should include a summary of the changes, the key modifications,
and the potential impact.

Diff:
{diff_summary}
"""
