"""FastAPI application exposing the keyword pipelines over JSON."""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from .config import Settings
from .observability import MetricsRecorder
from .services import KeywordServices
from .text import KeywordInputError

logger = logging.getLogger(__name__)


_LOGGING_CONFIGURED = False


def _ensure_logging(level: int = logging.INFO) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    package_logger = logging.getLogger("keywordlens")
    uvicorn_logger = logging.getLogger("uvicorn.error")

    handlers = list(uvicorn_logger.handlers)
    if handlers:
        package_logger.handlers = []
        for handler in handlers:
            package_logger.addHandler(handler)
    else:
        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
        package_logger.addHandler(handler)

    if package_logger.level == logging.NOTSET or package_logger.level > level:
        package_logger.setLevel(level)
    package_logger.propagate = False
    _LOGGING_CONFIGURED = True


class ApplicationState:
    """Container for runtime dependencies used by the FastAPI app."""

    def __init__(
        self,
        *,
        settings: Settings,
        services: KeywordServices,
        metrics: MetricsRecorder | None,
    ) -> None:
        self.settings = settings
        self.services = services
        self.metrics = metrics


async def _read_payload(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    return payload


def _require(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if value is None:
        raise HTTPException(status_code=400, detail=f"{key} is required")
    return value


def _require_text(payload: dict[str, Any], key: str) -> str:
    value = _require(payload, key)
    if not isinstance(value, str):
        raise HTTPException(status_code=400, detail=f"{key} must be a string")
    return value


def _keyword_field(payload: dict[str, Any], key: str, *, required: bool) -> Any:
    value = _require(payload, key) if required else payload.get(key)
    if value is None:
        return ()
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise HTTPException(status_code=400, detail=f"{key} must be a string or a list of strings")


def _coerce_optional_int(value: Any, *, min_value: int | None = None) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail="Expected integer value")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail="Expected integer value") from exc
    if min_value is not None and number < min_value:
        raise HTTPException(status_code=400, detail=f"Value must be >= {min_value}")
    return number


def _coerce_optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail="Expected numeric value")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail="Expected numeric value") from exc


def _invoke(operation: Callable[[], Any]) -> Any:
    try:
        return operation()
    except KeywordInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def create_app(
    *,
    settings: Settings | None = None,
    services: KeywordServices | None = None,
    metrics: MetricsRecorder | None = None,
) -> FastAPI:
    """Build the FastAPI application and wire its dependencies."""

    settings = settings or Settings.from_env()
    _ensure_logging(settings.resolved_log_level())
    if services is None:
        metrics = metrics or settings.build_metrics_recorder()
        services = KeywordServices(settings=settings, metrics=metrics)
    else:
        metrics = metrics or services.metrics

    app = FastAPI(title="keywordlens")
    app.state.services = ApplicationState(settings=settings, services=services, metrics=metrics)
    logger.info(
        "app.ready strategy=%s threshold=%s metrics=%s prometheus=%s",
        settings.cluster_strategy,
        settings.cluster_similarity_threshold,
        metrics.enabled if metrics is not None else False,
        metrics.prometheus_enabled if metrics is not None else False,
    )

    def get_state(request: Request) -> ApplicationState:
        return request.app.state.services

    def get_services(request: Request) -> KeywordServices:
        return get_state(request).services

    def get_metrics(request: Request) -> MetricsRecorder | None:
        return get_state(request).metrics

    @app.get("/health", response_class=JSONResponse)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics_endpoint(metrics: MetricsRecorder | None = Depends(get_metrics)) -> Response:
        if metrics is None or not metrics.prometheus_enabled:
            raise HTTPException(status_code=404, detail="Metrics export disabled")
        try:
            payload = metrics.render_prometheus()
        except RuntimeError as exc:  # pragma: no cover
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return Response(content=payload, media_type=metrics.prometheus_content_type)

    @app.post("/api/keywords/density", response_class=JSONResponse)
    async def density_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        content = _require_text(payload, "content")
        keywords = _keyword_field(payload, "keywords", required=True)
        result = _invoke(lambda: services.analyze_density(content, keywords))
        return result.to_dict()

    @app.post("/api/keywords/long-tail", response_class=JSONResponse)
    async def long_tail_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        content = _require_text(payload, "content")
        seeds = _keyword_field(payload, "seed_keywords", required=False)
        limit = _coerce_optional_int(payload.get("max_suggestions"), min_value=0)
        result = _invoke(lambda: services.generate_long_tail(content, seeds, limit))
        return result.to_dict()

    @app.post("/api/keywords/difficulty", response_class=JSONResponse)
    async def difficulty_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        keywords = _keyword_field(payload, "keywords", required=True)
        content = payload.get("content") or ""
        if not isinstance(content, str):
            raise HTTPException(status_code=400, detail="content must be a string")
        result = _invoke(lambda: services.estimate_difficulty(keywords, content))
        return result.to_dict()

    @app.post("/api/keywords/clusters", response_class=JSONResponse)
    async def clusters_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        keywords = _keyword_field(payload, "keywords", required=True)
        threshold = _coerce_optional_float(payload.get("similarity_threshold"))
        strategy = payload.get("strategy")
        if strategy is not None and not isinstance(strategy, str):
            raise HTTPException(status_code=400, detail="strategy must be a string")
        result = _invoke(
            lambda: services.cluster_keywords(keywords, similarity_threshold=threshold, strategy=strategy)
        )
        return result.to_dict()

    @app.post("/api/keywords/lsi", response_class=JSONResponse)
    async def lsi_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        content = _require_text(payload, "content")
        mains = _keyword_field(payload, "main_keywords", required=False)
        limit = _coerce_optional_int(payload.get("max_suggestions"), min_value=0)
        result = _invoke(lambda: services.generate_lsi(content, mains, limit))
        return result.to_dict()

    @app.post("/api/keywords/suggestions", response_class=JSONResponse)
    async def suggestions_endpoint(
        request: Request,
        services: KeywordServices = Depends(get_services),
    ) -> dict[str, Any]:
        payload = await _read_payload(request)
        content = _require_text(payload, "content")
        limit = _coerce_optional_int(payload.get("max_suggestions"), min_value=0)
        language = payload.get("language")
        if language is not None and not isinstance(language, str):
            raise HTTPException(status_code=400, detail="language must be a string")
        suggestions = _invoke(lambda: services.suggest_keywords(content, limit, language))
        return {
            "total": len(suggestions),
            "suggestions": [item.to_dict() for item in suggestions],
        }

    return app


__all__ = ["ApplicationState", "create_app"]
