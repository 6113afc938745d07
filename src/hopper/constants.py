"""Application-wide constants."""

APP_TITLE = "hopper"

# How far back (in characters) to look when deciding whether a match ends at point.
LOOKBACK_LIMIT: int = 100

PICKER_HINT = "  Enter to select · Esc/q to cancel"

HELP_TEXT = """\
 Hop
 ──────────────────────────────
 n            Next instance
 N / p        Previous instance
 s            Select active instance

 Instances
 ──────────────────────────────
 o            Add instance
 i            Edit active instance
 r            Rename active instance
 d d          Delete active instance

 General
 ──────────────────────────────
 ?            Toggle this help
 q            Quit\
"""
