"""
Growth Garden - goals grown as plants.

This package provides the health, streak and analytics calculator behind the
Growth Garden tracker, with features including:
- Tree health from last-watered timestamps
- Growth-stage plant visualization
- Growth analytics, activity streaks and trends
- Summary / detailed / analytics report export (CSV and JSON)
- A typed client for the Growth Garden REST API
"""

__version__ = "1.0.0"

from growth_garden.modules.health.tree_health import TreeHealth, calculate_tree_health
from growth_garden.modules.growth.growth_stage import get_plant_visualization
from growth_garden.modules.analytics.growth_analytics import (
    calculate_growth_analytics,
    calculate_streaks,
    generate_activity_trends,
    generate_detailed_goal_report,
)
from growth_garden.modules.analytics.report_export import export_report, export_to_csv

# Define public API
__all__ = [
    'TreeHealth',
    'calculate_tree_health',
    'get_plant_visualization',
    'calculate_growth_analytics',
    'calculate_streaks',
    'generate_activity_trends',
    'generate_detailed_goal_report',
    'export_report',
    'export_to_csv',
]
