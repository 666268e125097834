"""
Application-wide constants.
"""

# Soft cap on the diff summary sent to the language model
MAX_SUMMARY_CHARS = 20000

# Patches longer than this keep only their head and tail
MAX_PATCH_PER_FILE = 800

PATCH_TRUNCATION_MARKER = "\n... truncated ...\n"

# Number of recent X-GitHub-Delivery ids remembered for idempotency
MAX_DELIVERY_IDS = 1000

# Fallback descriptions when the language model cannot produce one
EMPTY_DESCRIPTION_FALLBACK = "Could not generate a description."
ERROR_DESCRIPTION_FALLBACK = "Error generating description."
