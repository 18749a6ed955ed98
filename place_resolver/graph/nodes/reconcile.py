"""장소 목록에 추출 결과를 반영하는 노드."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from place_resolver.core.exceptions import ResolverError
from place_resolver.graph.context import get_services
from place_resolver.graph.state import ResolverState
from place_resolver.graph.utils import fail_state
from place_resolver.services.reconciler import add_place, update_place


def reconcile_place(state: ResolverState, config: RunnableConfig) -> ResolverState:
    """데이터 파일을 읽고 신규 장소를 추가하거나 기존 장소를 업데이트합니다."""
    if state.get("error"):
        return state

    try:
        services = get_services(config)
        places = services.store.load()

        if state.get("is_update"):
            request = state.get("update_request")
            if request is None:
                return {**state, "error": "업데이트 요청이 추출되지 않았습니다.", "error_type": "ExtractionError"}
            place = update_place(places, request)
        else:
            candidate = state.get("candidate")
            if candidate is None:
                return {**state, "error": "신규 장소 후보가 추출되지 않았습니다.", "error_type": "ExtractionError"}
            place = add_place(places, candidate)
    except ResolverError as exc:
        return fail_state(state, exc, "reconcile")

    return {**state, "places": places, "place": place}
