# growth_garden/core/localization.py

"""
English / Chinese string catalog for the text the garden calculators and
dashboard emit. Lookups fall back to English, then to the key itself.
Placeholders use str.format syntax, e.g. "{hours}".
"""

import logging
from typing import Dict, Optional

from growth_garden.config import constants

logger = logging.getLogger(__name__)

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        # Navigation
        "nav.dailyStreak": "Daily Streak",
        "nav.level": "Level",
        "nav.gardener": "Gardener",
        "nav.export": "Export",
        "nav.weeklyReport": "Weekly Report",
        "nav.signOut": "Sign Out",
        # Stats
        "stats.activeGoals": "Active Goals",
        "stats.completedToday": "Completed Today",
        "stats.treesMature": "Trees Mature",
        "stats.needAttention": "Need Attention",
        # Actions
        "actions.completed": "Completed",
        "actions.upcoming": "Upcoming",
        "actions.overdue": "Overdue",
        "actions.pending": "Pending",
        "actions.noActions": "No actions yet. Create your first action to get started!",
        # Goals
        "goals.title": "Your Growth Garden",
        "goals.noGoals": "No goals planted yet. Plant your first goal to start growing!",
        "goals.status.withered": "Withered",
        "goals.status.needsWater": "Needs water in {hours}h",
        "goals.status.thriving": "Thriving",
        "goals.status.healthy": "Healthy",
        "goals.status.growing": "Growing",
        "goals.status.justPlanted": "Just planted",
        # Tree health
        "health.withered": "Tree has withered",
        "health.needsWater": "Needs water in {hours} hours",
        "health.healthy": "Tree is healthy",
        # Daily habits
        "habits.eatHealthy": "Eat Healthy",
        "habits.exercise": "Exercise",
        "habits.sleepBefore11pm": "Sleep Before 11 PM",
        "habits.completed": "habits completed",
        "habits.perfectFoundation": "Perfect foundation! 🌱",
        # Weekly report
        "weeklyReport.title": "Weekly Reflection Report",
        "weeklyReport.actionsCompleted": "Actions Completed",
        "weeklyReport.xpEarned": "XP Earned",
        "weeklyReport.dayStreak": "Day Streak",
        # Storage
        "storage.notPersistent": "Your data is stored temporarily and may be lost when the server restarts.",
        # Common
        "common.loading": "Loading...",
        "common.error": "Error",
        "common.success": "Success",
    },
    "zh": {
        "nav.dailyStreak": "每日连续",
        "nav.level": "等级",
        "nav.gardener": "园丁",
        "nav.export": "导出",
        "nav.weeklyReport": "周报",
        "nav.signOut": "退出登录",
        "stats.activeGoals": "活跃目标",
        "stats.completedToday": "今日完成",
        "stats.treesMature": "成熟树木",
        "stats.needAttention": "需要关注",
        "actions.completed": "已完成",
        "actions.upcoming": "即将到来",
        "actions.overdue": "已逾期",
        "actions.pending": "待完成",
        "actions.noActions": "还没有行动。创建你的第一个行动开始吧！",
        "goals.title": "你的成长花园",
        "goals.noGoals": "还没有种植目标。种植你的第一个目标开始成长吧！",
        "goals.status.withered": "已枯萎",
        "goals.status.needsWater": "{hours}小时内需要浇水",
        "goals.status.thriving": "茁壮成长",
        "goals.status.healthy": "健康",
        "goals.status.growing": "成长中",
        "goals.status.justPlanted": "刚种下",
        "health.withered": "树已枯萎",
        "health.needsWater": "{hours}小时内需要浇水",
        "health.healthy": "树很健康",
        "habits.eatHealthy": "健康饮食",
        "habits.exercise": "锻炼",
        "habits.sleepBefore11pm": "11点前睡觉",
        "habits.completed": "个习惯完成",
        "habits.perfectFoundation": "完美基础！🌱",
        "weeklyReport.title": "周反思报告",
        "weeklyReport.actionsCompleted": "完成行动",
        "weeklyReport.xpEarned": "获得经验",
        "weeklyReport.dayStreak": "连续天数",
        "storage.notPersistent": "你的数据为临时存储，服务器重启后可能丢失。",
        "common.loading": "加载中...",
        "common.error": "错误",
        "common.success": "成功",
    },
}


def translate(key: str, language: Optional[str] = None, **params) -> str:
    catalog = TRANSLATIONS.get(language or constants.FALLBACK_LANGUAGE, {})
    template = catalog.get(key)
    if template is None:
        template = TRANSLATIONS[constants.FALLBACK_LANGUAGE].get(key)
    if template is None:
        logger.debug("Missing translation key '%s'", key)
        return key
    if not params:
        return template
    try:
        return template.format(**params)
    except (KeyError, IndexError) as e:
        logger.warning("Translation '%s' missing placeholder %s", key, e)
        return template


def default_translate(key: str, **params) -> str:
    """English lookup for callers without a session."""
    return translate(key, constants.FALLBACK_LANGUAGE, **params)


class Translator:
    """Resolves catalog keys against the language held on a GardenSession."""

    def __init__(self, session=None, language: Optional[str] = None):
        self.session = session
        self._language = language

    @property
    def language(self) -> str:
        if self.session is not None:
            return self.session.language
        return self._language or constants.FALLBACK_LANGUAGE

    def t(self, key: str, **params) -> str:
        return translate(key, self.language, **params)

    __call__ = t
