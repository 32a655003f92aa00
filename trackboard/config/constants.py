"""
Centralized constants for trackboard.

Unit conversions, classification keywords and the defaults used by the
dashboard and weekly views live here so that the engine and the CLI agree
on them.
"""

# =============================================================================
# UNITS
# =============================================================================

MS_PER_HOUR = 1000 * 60 * 60
MS_PER_DAY = MS_PER_HOUR * 24

# Aggregates are reported at 0.1 hour granularity
HOURS_DECIMAL_PLACES = 1

# =============================================================================
# TASK CLASSIFICATION
# =============================================================================

# Coarse status types reported by the tracker that count as finished work
COMPLETED_STATUS_TYPES = frozenset({"closed", "done"})

# Fallback marker for the milestone task whose completion closes a project
LAUNCH_KEYWORD = "launch"
LAUNCH_ROLE = "launch"

# =============================================================================
# WEEKLY TRACKING
# =============================================================================

DEFAULT_WEEKS_BACK = 12

# Period label -> number of weeks shown in the weekly view
PERIOD_WEEKS = {
    "week": 1,
    "month": 4,
    "quarter": 12,
    "year": 52,
}

WEEKLY_MODES = ("auto", "entries", "snapshot")

UNATTRIBUTED_PROJECT_ID = "unattributed"
UNATTRIBUTED_PROJECT_NAME = "Unattributed"

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# =============================================================================
# CAPACITY PLANNING
# =============================================================================

DEFAULT_TEAM_SIZE = 1
DEFAULT_HOURS_PER_WEEK = 40

# =============================================================================
# ENVIRONMENT VARIABLES
# =============================================================================

ENV_VAR_DEFINITIONS: dict[str, dict] = {
    "TRACKBOARD_DATA_FILE": {
        "description": "Path to the tracker JSON export",
        "default": None,
        "valid_values": None,
    },
    "TRACKBOARD_FOLDER_ID": {
        "description": "Folder whose lists are treated as projects",
        "default": None,
        "valid_values": None,
    },
    "TRACKBOARD_TEAM_SIZE": {
        "description": "People working on the projects (weeks-to-completion)",
        "default": str(DEFAULT_TEAM_SIZE),
        "valid_values": None,
    },
    "TRACKBOARD_HOURS_PER_WEEK": {
        "description": "Hours each person works per week (weeks-to-completion)",
        "default": str(DEFAULT_HOURS_PER_WEEK),
        "valid_values": None,
    },
    "TRACKBOARD_WEEKLY_MODE": {
        "description": "Weekly bucket source: auto, entries or snapshot",
        "default": "auto",
        "valid_values": list(WEEKLY_MODES),
    },
    "TRACKBOARD_LOG_FILE": {
        "description": "Optional rotating log file for CLI runs",
        "default": None,
        "valid_values": None,
    },
}
