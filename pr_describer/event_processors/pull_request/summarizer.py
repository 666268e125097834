"""
Diff summarization for pull request descriptions.

Turns an unbounded, paginated list of changed files into a size-capped text
digest suitable for an LLM prompt.
"""

import logging
from collections.abc import AsyncIterable, Iterable

from pr_describer.core.constants import MAX_PATCH_PER_FILE, MAX_SUMMARY_CHARS, PATCH_TRUNCATION_MARKER
from pr_describer.core.models import ChangedFile

logger = logging.getLogger(__name__)


def truncate_patch(patch: str, max_chars: int = MAX_PATCH_PER_FILE) -> str:
    """
    Keep the head and tail of an oversized patch.

    Patches of max_chars characters or fewer are returned unchanged. Longer
    ones keep their first and last max_chars // 2 characters around a marker.
    """
    if len(patch) <= max_chars:
        return patch
    half = max_chars // 2
    return f"{patch[:half]}{PATCH_TRUNCATION_MARKER}{patch[-half:]}"


def format_file_block(changed_file: ChangedFile, max_patch_chars: int = MAX_PATCH_PER_FILE) -> str:
    """Render one changed file as a summary block."""
    block = (
        f"\n---\nfile: {changed_file.filename}\n"
        f"status: {changed_file.status}, additions: {changed_file.additions}, "
        f"deletions: {changed_file.deletions}, changes: {changed_file.changes}\n"
    )
    patch = changed_file.patch if isinstance(changed_file.patch, str) else ""
    if patch:
        block += f"patch:\n{truncate_patch(patch, max_patch_chars)}\n"
    return block


class DiffSummarizer:
    """
    Builds the diff summary for a pull request.

    The cap is soft: it is checked before each file is appended, so the result
    can overrun max_summary_chars by at most one file block. Once the cap is
    reached the page source is closed and no further pages are requested.
    """

    def __init__(self, max_summary_chars: int = MAX_SUMMARY_CHARS, max_patch_per_file: int = MAX_PATCH_PER_FILE):
        self.max_summary_chars = max_summary_chars
        self.max_patch_per_file = max_patch_per_file

    async def summarize(
        self,
        pr_number: int,
        owner: str,
        repo: str,
        pages: AsyncIterable[Iterable[ChangedFile]],
    ) -> str:
        summary = f"PR #{pr_number} in {owner}/{repo}\n"
        files_included = 0
        pages_read = 0

        page_iterator = aiter(pages)
        try:
            async for files in page_iterator:
                pages_read += 1
                for changed_file in files:
                    if len(summary) >= self.max_summary_chars:
                        break
                    summary += format_file_block(changed_file, self.max_patch_per_file)
                    files_included += 1
                if len(summary) >= self.max_summary_chars:
                    logger.info(
                        f"Summary for PR #{pr_number} in {owner}/{repo} reached {len(summary)} chars "
                        f"after {pages_read} page(s); skipping remaining files"
                    )
                    break
        finally:
            # Async generators are not closed by breaking out of 'async for'
            aclose = getattr(page_iterator, "aclose", None)
            if aclose is not None:
                await aclose()

        logger.debug(f"Summarized {files_included} files for PR #{pr_number} in {owner}/{repo}")
        return summary
