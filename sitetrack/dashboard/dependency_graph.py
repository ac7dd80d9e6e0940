"""
Task dependency graph builder.

Prefers the graph the server builds for a project. When the server has no
chart for the project (404), the graph is rebuilt from the project's task
list: one edge per entry in each task's `dependentTaskIds`.

Self-dependencies never become edges; they are reported as SelfDependency
warnings on the graph. Cycles are reported as DependencyCycle warnings and
their edges are kept.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Protocol, Union

from sitetrack.core.errors import (
    DataIntegrityWarning,
    DependencyCycle,
    FetchFailure,
    Found,
    MalformedRecord,
    NotFound,
    SelfDependency,
)
from sitetrack.core.models import DependencyEdge, DependencyGraph, WorkItem
from sitetrack.core.normalizer import as_id, normalize_many

logger = logging.getLogger(__name__)


class GraphSource(Protocol):
    async def fetch_dependency_chart(self, project_id: str) -> Union[Found, NotFound]: ...

    async def fetch_project_tasks(self, project_id: str) -> List[dict]: ...


def validate_dependencies(
    task_id: str,
    dependency_ids: Iterable[str],
    parent_id: Optional[str] = None,
) -> None:
    """
    Reject a dependency list that points at the task itself or its parent.

    Raises:
        SelfDependency: On the first offending id
    """
    task_id = str(task_id)
    parent = str(parent_id) if parent_id not in (None, "") else None
    for dep in dependency_ids:
        dep = str(dep)
        if dep == task_id or (parent is not None and dep == parent):
            raise SelfDependency(task_id, dep)


def find_cycles(edges: Iterable[DependencyEdge]) -> List[List[str]]:
    """
    Find dependency cycles.

    Each cycle is returned once, as the path of ids with the first id
    repeated at the end (e.g. ["a", "b", "a"]).
    """
    adjacency: Dict[str, List[str]] = defaultdict(list)
    for edge in edges:
        adjacency[edge.from_id].append(edge.to_id)

    visiting, done = 1, 2
    state: Dict[str, int] = {}
    path: List[str] = []
    seen = set()
    cycles: List[List[str]] = []

    def visit(node: str) -> None:
        state[node] = visiting
        path.append(node)
        for nxt in adjacency.get(node, ()):
            if state.get(nxt) == visiting:
                cycle = path[path.index(nxt):]
                key = frozenset(cycle), len(cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(cycle + [nxt])
            elif nxt not in state:
                visit(nxt)
        path.pop()
        state[node] = done

    for node in list(adjacency):
        if node not in state:
            visit(node)
    return cycles


def _self_dependency_warnings(nodes: List[WorkItem]) -> List[DataIntegrityWarning]:
    return [SelfDependency(node.id) for node in nodes if node.declares_self_dependency]


def edges_from_tasks(nodes: Iterable[WorkItem]) -> List[DependencyEdge]:
    """One edge per (dependency, task) pair; self pairs excluded."""
    edges: List[DependencyEdge] = []
    seen = set()
    for node in nodes:
        for dep_id in sorted(node.dependent_item_ids):
            edge = DependencyEdge(from_id=dep_id, to_id=node.id)
            if edge not in seen:
                seen.add(edge)
                edges.append(edge)
    return edges


def graph_from_chart(payload: dict) -> DependencyGraph:
    """Build a graph from the server's dependency-chart payload."""
    report = normalize_many(payload.get("tasks") or [])
    graph = DependencyGraph(
        nodes=report.items,
        source="remote",
        errors=report.errors,
        payload=payload,
    )
    graph.warnings.extend(_self_dependency_warnings(report.items))

    for raw_edge in payload.get("dependencies") or []:
        if not isinstance(raw_edge, dict):
            graph.errors.append(MalformedRecord(raw_edge, "dependency is not an object"))
            continue
        from_id, to_id = as_id(raw_edge.get("from")), as_id(raw_edge.get("to"))
        if from_id is None or to_id is None:
            graph.errors.append(MalformedRecord(raw_edge, "dependency without endpoints"))
        elif from_id == to_id:
            graph.warnings.append(SelfDependency(to_id))
        else:
            graph.edges.append(DependencyEdge(from_id=from_id, to_id=to_id))
    return graph


def graph_from_tasks(raw_tasks: List[dict]) -> DependencyGraph:
    """
    Rebuild a graph from a raw task list.

    Task ids resolve through `id`, `_id` and `taskId`. The shared id
    accessors also accept `issueId`; task records do not carry it.
    """
    report = normalize_many(raw_tasks)
    graph = DependencyGraph(
        nodes=report.items,
        edges=edges_from_tasks(report.items),
        source="fallback",
        errors=report.errors,
    )
    graph.warnings.extend(_self_dependency_warnings(report.items))
    graph.warnings.extend(DependencyCycle(cycle) for cycle in find_cycles(graph.edges))
    return graph


async def build_dependency_graph(project_id: str, client: GraphSource) -> DependencyGraph:
    """
    Build the dependency graph for a project.

    Args:
        project_id: Project to build the graph for
        client: Source of the chart and task list (SiteTrackClient)

    Returns:
        DependencyGraph with source 'remote' or 'fallback'

    Raises:
        FetchFailure: When either fetch fails for a reason other than 404,
            or the task list is not a list
    """
    chart = await client.fetch_dependency_chart(project_id)

    if isinstance(chart, Found):
        graph = graph_from_chart(chart.payload)
    else:
        logger.info("Rebuilding dependency graph for project %s from its tasks", project_id)
        raw_tasks = await client.fetch_project_tasks(project_id)
        if not isinstance(raw_tasks, list):
            raise FetchFailure("Expected a list of tasks", url=f"tasks/{project_id}")
        graph = graph_from_tasks(raw_tasks)

    for warning in graph.warnings:
        logger.warning("Project %s: %s", project_id, warning)
    if graph.errors:
        logger.warning("Project %s: skipped %d malformed records", project_id, len(graph.errors))
    return graph
