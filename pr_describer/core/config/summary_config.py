"""
Diff summary configuration.

Bounds the text handed to the language model so cost and latency stay
predictable regardless of how many files a pull request touches.
"""

from dataclasses import dataclass

from pr_describer.core.constants import MAX_PATCH_PER_FILE, MAX_SUMMARY_CHARS


@dataclass
class SummaryConfig:
    """Diff summary limits."""

    max_summary_chars: int = MAX_SUMMARY_CHARS
    max_patch_per_file: int = MAX_PATCH_PER_FILE
    files_per_page: int = 100
