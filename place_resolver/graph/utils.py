"""이슈 처리 그래프 공통 유틸리티."""

from place_resolver.core.logger import get_logger
from place_resolver.graph.state import ResolverState

logger = get_logger(__name__)


def fail_state(state: ResolverState, exc: Exception, step: str) -> ResolverState:
    """예외를 상태의 error/error_type으로 옮깁니다."""
    message = getattr(exc, "message", None) or str(exc) or exc.__class__.__name__
    logger.error("Step '%s' failed: %s: %s", step, exc.__class__.__name__, message)
    return {**state, "error": message, "error_type": exc.__class__.__name__}
