"""
Intcode VM — Defaults and Pipeline Profiles
===========================================

Every tunable lives here.  The CLI reads these as defaults and lets flags
override them per invocation.
"""

# =============================================================================
#  MEMORY
# =============================================================================
# Ceiling on on-demand growth.  Programs may address cells far past their
# image; anything beyond this is treated as an allocation failure.
MAX_MEMORY_CELLS = 1 << 24

# Fixed cell width (signed 64-bit)
CELL_BITS = 64
INT64_MIN = -(1 << (CELL_BITS - 1))
INT64_MAX = (1 << (CELL_BITS - 1)) - 1


# =============================================================================
#  EXECUTION
# =============================================================================
DEFAULT_MAX_STEPS = None       # None = run until output/halt/fault


# =============================================================================
#  I/O
# =============================================================================
DEFAULT_CHANNEL_CAPACITY = None   # None = unbounded between stages
PROMPT = "? "                     # shown only when stdin is a terminal


# =============================================================================
#  PIPELINE / PHASE SEARCH
# =============================================================================
DEFAULT_STAGES = 5
DEFAULT_SIGNAL = 0

PIPELINE_PROFILES = {
    "chain": {
        "phases": tuple(range(0, 5)),
        "feedback": False,
        "description": "single pass through 5 stages, phases 0-4",
    },
    "feedback": {
        "phases": tuple(range(5, 10)),
        "feedback": True,
        "description": "feedback loop over 5 stages until the last halts, phases 5-9",
    },
}
