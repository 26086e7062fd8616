"""FastAPI HTTP server exposing the task store."""

import time
from collections.abc import Callable
from typing import Annotated, Any, TypeVar
from uuid import uuid4

import structlog
from fastapi import FastAPI, HTTPException, Path, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import ValidationError

from task_service import __version__
from task_service.config import Settings, get_settings
from task_service.core import TaskNotFoundError, TaskStore
from task_service.models import Task, TaskCreate, TaskCreated
from task_service.utils.logging import get_logger
from task_service.utils.metrics import get_metrics

logger = get_logger(__name__)

T = TypeVar("T")


def parse_media_type(content_type: str) -> str | None:
    """Return the lowercased media type, or None if the header is unusable.

    Every parameter after the media type must be a non-empty name=value pair.
    """
    media_type, *params = content_type.split(";")
    media_type = media_type.strip().lower()
    if not media_type:
        return None
    for param in params:
        if not param.strip():
            continue
        name, sep, value = param.partition("=")
        if not sep or not name.strip() or not value.strip():
            return None
    return media_type


def create_http_server(
    store: TaskStore,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI HTTP server for the task API.

    Args:
        store: Task store shared by every request handler
        settings: Service settings (cached env settings if None)

    Returns:
        FastAPI application
    """
    settings = settings or get_settings()
    metrics = get_metrics()

    app = FastAPI(
        title="Task Service",
        description="Create, list, filter and delete tasks",
        version=__version__,
        docs_url=None,
        redoc_url=None,
    )

    def run_store_operation(operation: str, call: Callable[..., T], *args: Any) -> T:
        start = time.perf_counter()
        status = "success"
        try:
            return call(*args)
        except TaskNotFoundError:
            status = "not_found"
            raise
        finally:
            metrics.record_task_operation(operation, status, time.perf_counter() - start)
            metrics.task_count.set(len(store))

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next: Callable[..., Any]) -> Response:
        """Bind request fields to the log context and count the request."""
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        response = await call_next(request)

        endpoint = request.scope.get("endpoint")
        route = getattr(endpoint, "__name__", "unmatched")
        metrics.record_http_request(request.method, route, response.status_code)
        return response

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Answer malformed bodies and path segments with 400."""
        # Raw input may be undecodable bytes
        errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
        logger.info("request_rejected", errors=len(errors))
        return JSONResponse(
            content={"detail": jsonable_encoder(errors)},
            status_code=400,
        )

    @app.exception_handler(TaskNotFoundError)
    async def not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        """Answer lookups of unknown ids with 404."""
        logger.info("task_not_found", task_id=exc.task_id)
        return JSONResponse(content={"detail": str(exc)}, status_code=404)

    @app.post("/task/", response_model=TaskCreated)
    async def create_task(request: Request) -> TaskCreated:
        """Create a task from a JSON body with text, tags and due."""
        logger.info("task_create_requested")

        media_type = parse_media_type(request.headers.get("content-type", ""))
        if media_type is None:
            raise HTTPException(status_code=400, detail="missing or malformed Content-Type header")
        if media_type != "application/json":
            raise HTTPException(status_code=415, detail="expect application/json Content-Type")

        try:
            payload = TaskCreate.model_validate_json(await request.body())
        except ValidationError as e:
            raise RequestValidationError(e.errors()) from e

        task_id = run_store_operation(
            "create", store.create_task, payload.text, payload.tags, payload.due
        )
        logger.info("task_created", task_id=task_id, tags=payload.tags)
        return TaskCreated(id=task_id)

    @app.get("/task/", response_model=list[Task])
    async def get_all_tasks() -> list[Task]:
        """List every task."""
        logger.info("task_list_requested")
        return run_store_operation("list", store.get_all_tasks)

    @app.delete("/task/")
    async def delete_all_tasks() -> Response:
        """Delete every task."""
        logger.info("task_delete_all_requested")
        run_store_operation("delete_all", store.delete_all_tasks)
        return Response(status_code=200)

    @app.get("/task/{task_id}/", response_model=Task)
    async def get_task(task_id: int) -> Task:
        """Fetch one task by id."""
        logger.info("task_get_requested", task_id=task_id)
        return run_store_operation("get", store.get_task, task_id)

    @app.delete("/task/{task_id}/")
    async def delete_task(task_id: int) -> Response:
        """Delete one task by id."""
        logger.info("task_delete_requested", task_id=task_id)
        run_store_operation("delete", store.delete_task, task_id)
        return Response(status_code=200)

    @app.get("/tag/{tag}/", response_model=list[Task])
    async def get_tasks_by_tag(tag: str) -> list[Task]:
        """List tasks carrying a tag."""
        logger.info("tasks_by_tag_requested", tag=tag)
        return run_store_operation("by_tag", store.get_tasks_by_tag, tag)

    @app.get("/due/{year}/{month}/{day}/", response_model=list[Task])
    async def get_tasks_by_due_date(
        year: int,
        month: Annotated[int, Path(ge=1, le=12)],
        day: int,
    ) -> list[Task]:
        """List tasks due on a calendar day."""
        logger.info("tasks_by_due_requested", year=year, month=month, day=day)
        return run_store_operation("by_due", store.get_tasks_by_due_date, year, month, day)

    @app.get("/health")
    async def health() -> JSONResponse:
        """Liveness check endpoint.

        Returns 200 if the service is running.
        """
        return JSONResponse(
            content={"status": "ok", "service": "task-service", "tasks": len(store)},
            status_code=200,
        )

    if settings.metrics_enabled:

        @app.get("/metrics")
        async def metrics_endpoint() -> Response:
            """Prometheus metrics endpoint.

            Returns metrics in Prometheus exposition format.
            """
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    return app
