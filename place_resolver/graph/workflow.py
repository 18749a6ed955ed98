"""이슈 처리 그래프 워크플로우 구성.

extract → reconcile → (resolve_image: 이미지 없는 신규 장소만) → persist → publish
어느 단계에서든 오류가 나면 fail로 이동해 종료합니다.
"""

from langgraph.graph import END, StateGraph

from place_resolver.graph.nodes import (
    extract_place,
    persist_places,
    publish_changes,
    reconcile_place,
    report_failure,
    resolve_place_image,
)
from place_resolver.graph.state import ResolverState


def _route_after_extract(state: ResolverState) -> str:
    return "fail" if state.get("error") else "reconcile"


def _route_after_reconcile(state: ResolverState) -> str:
    """신규 장소이고 이미지가 아직 없으면 이미지 단계를 거칩니다."""
    if state.get("error"):
        return "fail"
    place = state.get("place")
    if not state.get("is_update") and place is not None and place.image == "":
        return "resolve_image"
    return "persist"


def _route_after_image(state: ResolverState) -> str:
    return "fail" if state.get("error") else "persist"


def _route_after_persist(state: ResolverState) -> str:
    return "fail" if state.get("error") else "publish"


def _route_after_publish(state: ResolverState) -> str:
    return "fail" if state.get("error") else END


def _create_resolver_workflow() -> StateGraph:
    """이슈 처리 그래프 워크플로우를 생성합니다."""
    workflow = StateGraph(ResolverState)

    workflow.add_node("extract", extract_place)
    workflow.add_node("reconcile", reconcile_place)
    workflow.add_node("resolve_image", resolve_place_image)
    workflow.add_node("persist", persist_places)
    workflow.add_node("publish", publish_changes)
    workflow.add_node("fail", report_failure)

    workflow.set_entry_point("extract")
    workflow.add_conditional_edges("extract", _route_after_extract, ["reconcile", "fail"])
    workflow.add_conditional_edges("reconcile", _route_after_reconcile, ["resolve_image", "persist", "fail"])
    workflow.add_conditional_edges("resolve_image", _route_after_image, ["persist", "fail"])
    workflow.add_conditional_edges("persist", _route_after_persist, ["publish", "fail"])
    workflow.add_conditional_edges("publish", _route_after_publish, [END, "fail"])
    workflow.add_edge("fail", END)

    return workflow


compiled_resolver_graph = _create_resolver_workflow().compile()
