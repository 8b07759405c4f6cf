# growth_garden/config/constants.py

"""
Centralized configuration of quantitative and qualitative parameters
used throughout Growth Garden: health decay windows, plant growth stages,
status vocabularies, reflection scales and report layouts.
"""

from typing import Dict, Final, Tuple

# =====================================================================
# Tree Health
# =====================================================================
HEALTH_WARNING_HOURS: Final[float] = 72.0
# RATIONALE: Three days without a completed action puts a plant into the warning state.
HEALTH_WITHERED_HOURS: Final[float] = 168.0
# RATIONALE: Seven days without watering and the plant is considered withered.
HEALTH_FALLBACK_HOURS_SINCE_WATERED: Final[float] = 24.0
# RATIONALE: Goals with no (or an unreadable) last-watered timestamp are shown as
#            watered one day ago, which always yields a healthy plant.
HOURS_PER_DAY: Final[int] = 24

HEALTH_STATUS_HEALTHY: Final[str] = "healthy"
HEALTH_STATUS_WARNING: Final[str] = "warning"
HEALTH_STATUS_WITHERED: Final[str] = "withered"

# =====================================================================
# Status Strings / Enums
# =====================================================================
GOAL_STATUS_ACTIVE: Final[str] = "active"
GOAL_STATUS_COMPLETED: Final[str] = "completed"
GOAL_STATUS_WITHERED: Final[str] = "withered"
# RATIONALE: Lifecycle states of a goal as stored by the remote API.

ACTION_STATUS_PENDING: Final[str] = "pending"
ACTION_STATUS_COMPLETED: Final[str] = "completed"
ACTION_DISPLAY_OVERDUE: Final[str] = "overdue"
# RATIONALE: "overdue" is never stored; it is derived for pending actions past their due date.

# =====================================================================
# Plants & Growth Stages
# =====================================================================
PLANT_TYPES: Final[Tuple[str, ...]] = ("sprout", "herb", "tree", "flower")
DEFAULT_PLANT_TYPE: Final[str] = "sprout"
# RATIONALE: Unknown plant types are drawn with the sprout sequence.

PLANT_EMOJIS: Final[Dict[str, str]] = {
    "sprout": "🌱",
    "herb": "🌿",
    "tree": "🌳",
    "flower": "🌸",
}

PLANT_TYPE_NAMES: Final[Dict[str, str]] = {
    "sprout": "Sprout",
    "herb": "Herb",
    "tree": "Tree",
    "flower": "Flower",
}
DEFAULT_PLANT_TYPE_NAME: Final[str] = "Plant"

GROWTH_STAGES: Final[Dict[str, Tuple[str, ...]]] = {
    "sprout": ("🌱", "🌿", "🌱🌿", "🌱🌿🌱"),
    "herb": ("🌿", "🌱🌿", "🌿🌱🌿", "🌿🌱🌿🌱"),
    "tree": ("🌱", "🌿", "🌳", "🌳🌿"),
    "flower": ("🌸", "🌸🌿", "🌸🌿🌸", "🌸🌿🌸🌿"),
}
# RATIONALE: Level N shows stage N-1; levels past the last stage keep the last stage.

WITHERED_GLYPHS: Final[Dict[str, str]] = {
    "flower": "🥀",
    "tree": "🌳",
    "herb": "🌿",
    "sprout": "🌱",
}
DEFAULT_WITHERED_GLYPH: Final[str] = "🥀"

# Level bands used for goal status text and dashboard maturity
LEVEL_THRIVING: Final[int] = 5
LEVEL_HEALTHY: Final[int] = 3
LEVEL_GROWING: Final[int] = 1
MATURE_GOAL_LEVEL: Final[int] = LEVEL_THRIVING
# RATIONALE: A goal at level 5 or above counts as a mature tree on the dashboard.

UPCOMING_ACTIONS_LIMIT: Final[int] = 5

# =====================================================================
# Reflections & Habits
# =====================================================================
REFLECTION_SCALE_MIN: Final[int] = 1
REFLECTION_SCALE_MAX: Final[int] = 5
# RATIONALE: Difficulty and satisfaction are both rated on a 1–5 scale.

FEELING_EMOJIS: Final[Dict[str, str]] = {
    "Happy": "😊",
    "Excited": "🎉",
    "Relaxed": "😌",
    "Accomplished": "💪",
    "Relieved": "😌",
    "Confident": "😎",
    "Thoughtful": "🤔",
    "Tired": "😴",
    "Stressed": "😅",
    "Frustrated": "😤",
    "Grateful": "😇",
    "Proud": "🤗",
}

DAILY_HABIT_KEYS: Final[Tuple[str, ...]] = ("eat_healthy", "exercise", "sleep_before_11pm")
# RATIONALE: The three foundation habits tracked by the daily check-in.

# =====================================================================
# Reports & Export
# =====================================================================
REPORT_TYPES: Final[Tuple[str, ...]] = ("summary", "detailed", "analytics")
EXPORT_FORMATS: Final[Tuple[str, ...]] = ("csv", "json")

REPORT_TITLES: Final[Dict[str, str]] = {
    "summary": "Growth Garden Summary Report",
    "detailed": "Growth Garden Detailed Report",
    "analytics": "Growth Garden Analytics Report",
}

SUMMARY_CSV_HEADER: Final[str] = "Metric,Value"
DETAILED_CSV_HEADER: Final[str] = (
    "Goal Name,Plant Type,Level,XP,Status,Actions Count,Completed Actions,"
    "Total XP from Actions,Completion Rate,Days Active,Last Activity"
)
TRENDS_CSV_TITLE: Final[str] = "Daily Activity Trends"
TRENDS_CSV_HEADER: Final[str] = "Date,Actions Count"
NEVER_ACTIVE_LABEL: Final[str] = "Never"
NO_ACTIVE_GOAL_LABEL: Final[str] = "None"

EXPORT_FILENAME_PREFIX: Final[str] = "growth-garden"
EXPORT_MEDIA_TYPES: Final[Dict[str, str]] = {
    "csv": "text/csv",
    "json": "application/json",
}

DEFAULT_ACTIVITY_TREND_DAYS: Final[int] = 30

# =====================================================================
# Localization
# =====================================================================
SUPPORTED_LANGUAGES: Final[Tuple[str, ...]] = ("en", "zh")
FALLBACK_LANGUAGE: Final[str] = "en"

# =====================================================================
# Remote API Resources (cache families)
# =====================================================================
RESOURCE_GOALS: Final[str] = "goals"
RESOURCE_ACTIONS: Final[str] = "actions"
RESOURCE_ACHIEVEMENTS: Final[str] = "achievements"
RESOURCE_DAILY_HABITS: Final[str] = "daily-habits"
RESOURCE_WEEKLY_REPORT: Final[str] = "weekly-report"
RESOURCE_HISTORICAL_REPORTS: Final[str] = "historical-reports"
RESOURCE_STORAGE_STATUS: Final[str] = "storage-status"
RESOURCE_CURRENT_USER: Final[str] = "auth-me"
# RATIONALE: First element of every cache key; invalidation drops a whole family at once.

OAUTH_PROVIDERS: Final[Tuple[str, ...]] = ("google", "github")
