"""
FlowerEngine Node Selection

Selection policies over an already fetched metadata document.

Two independent policies:
- best available: lowest latency among listed nodes that are not failing
  and pass the report health checks, else the first non-failing node
- best overall: highest weighted_score among engine nodes in the report,
  regardless of the failing node list

Both are pure functions and never modify the document.
"""

from typing import Optional

from shared.models import (
    NodeListing,
    NodeMetadataDocument,
    NodeReport,
    NodeSelection,
    NoNodeReason,
)


def available_nodes(document: NodeMetadataDocument) -> list[str]:
    """Listed nodes that are not flagged as failing, in published order."""
    return [
        node for node in document.nodes
        if node not in document.failing_nodes
    ]


def list_active_and_failing(document: NodeMetadataDocument) -> NodeListing:
    """Active/failing view of the document, with no report filtering."""
    return NodeListing(
        active=available_nodes(document),
        failing=dict(document.failing_nodes)
    )


def find_report(
    document: NodeMetadataDocument,
    node: str
) -> Optional[NodeReport]:
    """Return the first report row for a node URL, if any."""
    for report in document.report or []:
        if report.node == node:
            return report
    return None


def is_candidate(report: NodeReport) -> bool:
    """
    Check whether a report row may be picked by latency.

    Requires an engine node whose token and config benchmarks passed
    and whose latency benchmark passed with a millisecond figure.
    """
    if report.engine is not True:
        return False
    if report.token is None or report.token.ok is not True:
        return False
    if report.config is None or report.config.ok is not True:
        return False
    if report.latency is None or report.latency.ok is not True:
        return False
    return report.latency.latency_ms is not None


def select_best_available(document: NodeMetadataDocument) -> NodeSelection:
    """
    Pick the fastest healthy node among the non-failing ones.

    Ties keep the node listed first. When no node passes the checks,
    the first available node is returned with `fallback` set.
    """
    candidates = available_nodes(document)
    if not candidates:
        return NodeSelection.empty(NoNodeReason.NO_AVAILABLE_NODES)

    best_node: Optional[str] = None
    best_latency = float("inf")

    for node in candidates:
        report = find_report(document, node)
        if report is None or not is_candidate(report):
            continue
        latency = report.latency.latency_ms
        if latency < best_latency:
            best_latency = latency
            best_node = node

    if best_node is None:
        return NodeSelection(node=candidates[0], fallback=True)

    return NodeSelection(node=best_node)


def _score_key(report: NodeReport) -> float:
    if report.weighted_score is None:
        return float("-inf")
    return report.weighted_score


def select_best_overall(document: NodeMetadataDocument) -> NodeSelection:
    """
    Pick the engine node with the highest weighted_score in the report.

    Ties keep the row that appears first in the report.
    """
    if not document.report:
        return NodeSelection.empty(NoNodeReason.NO_REPORT)

    engine_reports = [r for r in document.report if r.engine is True]
    if not engine_reports:
        return NodeSelection.empty(NoNodeReason.NO_ENGINE_NODES)

    # sorted() is stable with reverse=True as well
    ranked = sorted(engine_reports, key=_score_key, reverse=True)
    return NodeSelection(node=ranked[0].node)
