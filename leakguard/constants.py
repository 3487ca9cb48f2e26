"""Shared constants for LeakGuard.

All size limits used by the scan engine and the config loader are defined here.
Import from this module instead of repeating numbers elsewhere.
"""

# ─── Scan Engine Window Constants ─────────────────────────────────────────────

# Small/large input threshold, in characters.
# Inputs up to this length are scanned synchronously in one pass. Longer inputs
# are walked in windows of this many characters, with a yield to the event loop
# between windows so a single large scan cannot starve other tasks.
CHUNK_SIZE: int = 50 * 1024  # 51,200 characters

# Extra trailing characters appended to every window.
# A pattern occurrence that starts before a window boundary and ends after it is
# still fully contained in the earlier window, as long as it is no longer than
# CHUNK_OVERLAP characters past the boundary.
CHUNK_OVERLAP: int = 100

# ─── Config Constants ─────────────────────────────────────────────────────────

# Current supported config file version
SUPPORTED_CONFIG_VERSION: int = 1
