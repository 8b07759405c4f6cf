# growth_garden/modules/growth/growth_stage.py

import logging
import math
from datetime import datetime
from typing import Any, Dict, Optional

from growth_garden.config import constants
from growth_garden.garden.models import Goal
from growth_garden.modules.health.tree_health import TreeHealth, calculate_tree_health

logger = logging.getLogger(__name__)


def _stages_for(plant_type: Optional[str]):
    stages = constants.GROWTH_STAGES.get(plant_type or "")
    if stages is None:
        logger.debug("Unknown plant type '%s'; using the sprout stages.", plant_type)
        stages = constants.GROWTH_STAGES[constants.DEFAULT_PLANT_TYPE]
    return stages


def get_growth_stage_index(plant_type: Optional[str], level: int) -> int:
    """Stage index for a level: level 1 is stage 0, saturating at the last stage."""
    last_index = len(_stages_for(plant_type)) - 1
    return min(max(int(level) - 1, 0), last_index)


def get_plant_visualization(plant_type: Optional[str], level: int, status: Optional[str] = None) -> str:
    """
    Glyph for a plant at a given level. Withered goals short-circuit to the
    withered glyph of their plant type.
    """
    if status == constants.GOAL_STATUS_WITHERED:
        return constants.WITHERED_GLYPHS.get(plant_type or "", constants.DEFAULT_WITHERED_GLYPH)
    stages = _stages_for(plant_type)
    return stages[get_growth_stage_index(plant_type, level)]


def get_plant_type_name(plant_type: Optional[str]) -> str:
    return constants.PLANT_TYPE_NAMES.get(plant_type or "", constants.DEFAULT_PLANT_TYPE_NAME)


def get_goal_status_text(goal: Goal, health: TreeHealth, translate=None) -> str:
    if translate is None:
        from growth_garden.core.localization import default_translate
        translate = default_translate

    if goal.status == constants.GOAL_STATUS_WITHERED:
        return translate("goals.status.withered")
    if health.status == constants.HEALTH_STATUS_WARNING:
        return translate("goals.status.needsWater", hours=math.ceil(health.hours_until_death))
    if goal.current_level >= constants.LEVEL_THRIVING:
        return translate("goals.status.thriving")
    if goal.current_level >= constants.LEVEL_HEALTHY:
        return translate("goals.status.healthy")
    if goal.current_level >= constants.LEVEL_GROWING:
        return translate("goals.status.growing")
    return translate("goals.status.justPlanted")


def get_progress_percentage(current_xp: int, max_xp: int) -> float:
    """XP progress toward the next level, 0-100."""
    if max_xp <= 0:
        return 0.0
    return min(100.0, current_xp / max_xp * 100)


def build_goal_card(goal: Goal, now: Optional[datetime] = None, translate=None) -> Dict[str, Any]:
    """Everything a goal card displays, computed from one goal snapshot."""
    health = calculate_tree_health(goal.last_watered, now=now)
    return {
        "goal": goal.to_payload(),
        "plant": get_plant_visualization(goal.plant_type, goal.current_level, goal.status),
        "plantTypeName": get_plant_type_name(goal.plant_type),
        "stageIndex": get_growth_stage_index(goal.plant_type, goal.current_level),
        "health": health.model_dump(by_alias=True),
        "statusText": get_goal_status_text(goal, health, translate=translate),
        "progress": get_progress_percentage(goal.current_xp, goal.max_xp),
    }
