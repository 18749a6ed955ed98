"""장소 목록 저장 및 git 게시 노드."""

from __future__ import annotations

from langchain_core.runnables import RunnableConfig

from place_resolver.core.exceptions import ResolverError
from place_resolver.core.logger import get_logger
from place_resolver.graph.context import get_services
from place_resolver.graph.state import ResolverState
from place_resolver.graph.utils import fail_state

logger = get_logger(__name__)


def persist_places(state: ResolverState, config: RunnableConfig) -> ResolverState:
    """전체 장소 목록을 인코딩해 데이터 파일을 덮어씁니다."""
    if state.get("error"):
        return state

    try:
        services = get_services(config)
        services.store.save(state.get("places") or [])
    except (ResolverError, OSError) as exc:
        return fail_state(state, exc, "persist")
    return state


def publish_changes(state: ResolverState, config: RunnableConfig) -> ResolverState:
    """제출자 명의로 커밋하고 새 브랜치를 푸시합니다."""
    if state.get("error"):
        return state

    place = state.get("place")
    if place is None:
        return {**state, "error": "게시할 장소가 없습니다.", "error_type": "PublicationError"}

    try:
        services = get_services(config)
        branch_name = services.publisher.publish(
            place,
            is_update=bool(state.get("is_update")),
            identity=state["issue"].commit_identity(),
            image_added=bool(state.get("image_added")) and not state.get("is_update"),
        )
    except ResolverError as exc:
        return fail_state(state, exc, "publish")

    return {**state, "branch_name": branch_name}


def report_failure(state: ResolverState) -> ResolverState:
    """실패 상태를 기록합니다. 이후 단계는 실행되지 않습니다."""
    logger.error("Issue processing aborted: %s", state.get("error"))
    return state
