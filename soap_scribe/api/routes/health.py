"""Health check endpoints."""

from fastapi import APIRouter, Depends, Request

from soap_scribe import __version__
from soap_scribe.api.dependencies import get_llm_router
from soap_scribe.llm import LLMRouter
from soap_scribe.observability import get_observability_logger
from soap_scribe.templates import TEMPLATE_REGISTRY

router = APIRouter()


@router.get("/health")
async def health_check() -> dict:
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "soap-scribe",
        "version": __version__,
    }


@router.get("/health/ready")
async def readiness_check(
    request: Request,
    llm_router: LLMRouter = Depends(get_llm_router),
) -> dict:
    """Readiness check - verifies an LLM provider is reachable."""
    errors = []
    llm_health: dict[str, bool] = {}

    try:
        llm_health = await llm_router.health_check()
        if not any(llm_health.values()):
            errors.append("No LLM available")
    except Exception as e:
        errors.append(f"LLM check failed: {e}")

    if getattr(request.app.state, "transcriber", None) is None:
        errors.append("Transcription not configured")

    if errors:
        return {
            "status": "not_ready",
            "errors": errors,
        }

    return {
        "status": "ready",
        "llm": llm_health,
        "templates": len(TEMPLATE_REGISTRY),
    }


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness check - basic process health."""
    return {"status": "alive"}


@router.get("/health/stats")
async def usage_stats(recent: int = 0) -> dict:
    """Call counts, error rates and latency from the observability logs.

    Pass ``recent`` to also return the last few note generations.
    """
    obs = get_observability_logger()
    result: dict = {log_type: obs.get_stats(log_type) for log_type in obs.log_types}
    if recent > 0:
        result["recent_generations"] = obs.get_recent_events("generation", limit=recent)
    return result
