"""
Dashboard module for SiteTrack.

Provides list-view classification, urgency ordering, dependency graphs,
per-project/per-assignee aggregation and CLI formatting.
"""

from .prioritizer import (
    compare_urgency,
    days_until_due,
    sort_by_urgency,
    ISSUES_MODE,
    TASKS_MODE,
)
from .classifier import (
    BadgeCounts,
    FilterCriteria,
    FilterOptions,
    apply_filters,
    badge_counts,
    build_list_view,
    display_filter,
    filter_options,
    is_incomplete_task,
    is_open,
    is_unresolved_issue,
    matches_query,
)
from .dependency_graph import (
    build_dependency_graph,
    find_cycles,
    validate_dependencies,
)
from .aggregator import (
    DashboardAggregator,
    HeatmapRow,
    ListView,
    aggregate_by_assignee,
    aggregate_by_project,
    assignee_buckets,
    issue_heatmap,
)
from .formatter import DashboardFormatter

__all__ = [
    # Prioritizer
    'compare_urgency',
    'days_until_due',
    'sort_by_urgency',
    'ISSUES_MODE',
    'TASKS_MODE',
    # Classifier
    'BadgeCounts',
    'FilterCriteria',
    'FilterOptions',
    'apply_filters',
    'badge_counts',
    'build_list_view',
    'display_filter',
    'filter_options',
    'is_incomplete_task',
    'is_open',
    'is_unresolved_issue',
    'matches_query',
    # Dependency graph
    'build_dependency_graph',
    'find_cycles',
    'validate_dependencies',
    # Aggregator
    'DashboardAggregator',
    'HeatmapRow',
    'ListView',
    'aggregate_by_assignee',
    'aggregate_by_project',
    'assignee_buckets',
    'issue_heatmap',
    # Formatter
    'DashboardFormatter',
]
