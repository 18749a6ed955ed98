"""이슈 한 건을 처리하는 파이프라인 실행 서비스."""

from __future__ import annotations

from place_resolver.core.config import Settings
from place_resolver.core.exceptions import ResolverError
from place_resolver.core.logger import get_logger
from place_resolver.graph.context import ResolverServices
from place_resolver.graph.workflow import compiled_resolver_graph
from place_resolver.schemas.issue import RunOutputs

logger = get_logger(__name__)


def run_resolver_pipeline(settings: Settings, services: ResolverServices | None = None) -> RunOutputs:
    """이슈 처리 그래프를 실행하고 CI 출력 값을 반환합니다.

    Args:
        settings: 검증을 마친 실행 설정.
        services: 주입할 협력자 묶음. 없으면 설정으로 생성합니다.

    Returns:
        성공 시 branch_name/place_title/is_update, 실패 시 error_message를 담은 RunOutputs.
    """
    issue = settings.issue()
    logger.info("Processing issue #%s: %s", issue.number, issue.title)

    try:
        services = services or ResolverServices.from_settings(settings)
        initial_state = {
            "issue": issue,
            "is_update": issue.is_update,
            "screenshot_mode": settings.SCREENSHOT_MODE,
        }
        result = compiled_resolver_graph.invoke(
            initial_state,
            config={"configurable": {"services": services}},
        )
    except ResolverError as exc:
        logger.error("Error processing issue: %s", exc.message)
        return RunOutputs(error=True, error_message=exc.message)
    except Exception as exc:
        logger.exception("Unexpected error while processing issue #%s", issue.number)
        return RunOutputs(error=True, error_message=str(exc) or exc.__class__.__name__)

    if error := result.get("error"):
        return RunOutputs(error=True, error_message=error)

    place = result["place"]
    logger.info("Successfully processed issue #%s (%s)", issue.number, place.title)
    return RunOutputs(
        branch_name=result.get("branch_name"),
        place_title=place.title,
        is_update=bool(result.get("is_update")),
    )
