"""이슈 처리 그래프 노드 모음."""

from place_resolver.graph.nodes.extract import extract_place
from place_resolver.graph.nodes.images import resolve_place_image
from place_resolver.graph.nodes.persist import persist_places, publish_changes, report_failure
from place_resolver.graph.nodes.reconcile import reconcile_place

__all__ = [
    "extract_place",
    "reconcile_place",
    "resolve_place_image",
    "persist_places",
    "publish_changes",
    "report_failure",
]
