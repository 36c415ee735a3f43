"""ASGI application for ClairOS."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from clairos import __version__, metrics
from clairos.config import Settings, get_settings
from clairos.logging_utils import configure_logging as configure_app_logging
from clairos.models.preferences import AppPreferences, TaskViewMode
from clairos.models.session import UserSession
from clairos.models.shopping import ShoppingItem, ShoppingList
from clairos.server import deps
from clairos.shopping.categories import CategoryTable
from clairos.storage import build_storage
from clairos.timers.store import Timer, TimerStore, format_remaining, live_remaining_ms
from clairos.uploads.gateway import UploadError, UploadGateway

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _configure_logging(settings: Settings) -> None:
    secrets = [settings.minio_secret_key or ""]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="ClairOS", version=__version__)
    application.state.storage = build_storage(settings)
    application.state.timer_store = TimerStore()

    if settings.storage_backend == "local":
        application.mount(
            "/files",
            StaticFiles(directory=str(settings.storage_dir), check_dir=False),
            name="files",
        )

    if settings.timer_sweep_enabled:
        timer_scheduler = AsyncIOScheduler()

        def sweep_timers() -> None:
            completed = application.state.timer_store.check_completions()
            if completed:
                metrics.TIMER_COMPLETIONS.inc(len(completed))

        timer_scheduler.add_job(
            sweep_timers,
            "interval",
            seconds=settings.timer_sweep_interval,
            max_instances=1,
            coalesce=True,
        )

        @application.on_event("startup")
        async def start_timer_sweep() -> None:
            timer_scheduler.start()

        @application.on_event("shutdown")
        async def stop_timer_sweep() -> None:
            if timer_scheduler.running:
                timer_scheduler.shutdown(wait=False)

    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("clairos.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details without leaking sensitive data."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            path = request.url.path
            method = request.method
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(
                    duration_ms / 1000.0
                )
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(
                method=method,
                path=path,
                status=str(response.status_code),
            ).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_preview: str | None = None
        try:
            raw_body = await request.body()
            if raw_body:
                decoded = raw_body.decode("utf-8", errors="replace")
                if len(decoded) > 2048:
                    decoded = decoded[:2048] + "...(truncated)"
                body_preview = decoded
        except Exception:  # pragma: no cover - defensive logging
            body_preview = "<unable to read body>"

        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}

        logger.warning(
            "Validation error on %s %s: %s | body=%s",
            request.method,
            request.url.path,
            exc.errors(),
            body_preview,
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _normalize_validation_errors(exc.errors())},
        )

    @application.post("/upload", summary="Upload a file to storage")
    async def upload_endpoint(
        request: Request,
        gateway: UploadGateway = Depends(deps.get_upload_gateway),
    ) -> JSONResponse:
        try:
            # The session is resolved before the request body is read.
            session = await run_in_threadpool(gateway.authenticate, request.headers)
            payload: Optional[bytes] = None
            filename: Optional[str] = None
            content_type: Optional[str] = None
            try:
                form = await request.form()
            except (StarletteHTTPException, MultiPartException) as exc:
                logger.debug("Unreadable upload form user_id=%s: %s", session.user_id, exc)
                upload = None
            else:
                upload = form.get("file")
            if isinstance(upload, UploadFile):
                payload = await upload.read()
                filename = upload.filename
                content_type = upload.content_type
            result = await run_in_threadpool(
                gateway.store, session, payload, filename, content_type
            )
        except UploadError as exc:
            return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
        return JSONResponse(content={"url": result.url})

    @application.get(
        "/shopping/lists",
        response_model=list[ShoppingList],
        summary="List a family's shopping lists",
    )
    def shopping_lists_list(
        family_id: Optional[str] = Query(default=None, alias="familyId"),
        session: UserSession = Depends(deps.require_session),
        provider: deps.ShoppingListsProvider = Depends(deps.get_shopping_lists_provider),
    ) -> list[ShoppingList]:
        if not family_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="familyId is required"
            )
        return provider(family_id)

    @application.post(
        "/shopping/lists",
        response_model=ShoppingList,
        status_code=status.HTTP_201_CREATED,
        summary="Create a shopping list",
    )
    def shopping_lists_create(
        payload: ShoppingListCreateRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        creator: deps.ShoppingListCreator = Depends(deps.get_shopping_list_creator),
    ) -> ShoppingList:
        shopping_list = creator(
            {
                "family_id": payload.family_id,
                "name": payload.name,
                "created_by_id": session.user_id,
            }
        )
        logger.debug("Created shopping list id=%s family_id=%s", shopping_list.id, payload.family_id)
        return shopping_list

    @application.get(
        "/shopping/lists/{list_id}",
        response_model=ShoppingList,
        summary="Get a shopping list with its items",
    )
    def shopping_lists_get(
        list_id: str,
        session: UserSession = Depends(deps.require_session),
        fetcher: deps.ShoppingListFetcher = Depends(deps.get_shopping_list_fetcher),
    ) -> ShoppingList:
        shopping_list = fetcher(list_id)
        if shopping_list is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Shopping list not found"
            )
        return shopping_list

    @application.patch(
        "/shopping/lists/{list_id}",
        response_model=ShoppingList,
        summary="Rename a shopping list or edit its notes",
    )
    def shopping_lists_update(
        list_id: str,
        payload: ShoppingListUpdateRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        updater: deps.ShoppingListUpdater = Depends(deps.get_shopping_list_updater),
    ) -> ShoppingList:
        update_payload = payload.model_dump(exclude_unset=True)
        try:
            return updater(list_id, update_payload)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.post(
        "/shopping/lists/{list_id}/complete",
        response_model=ShoppingList,
        summary="Mark a shopping list as completed",
    )
    def shopping_lists_complete(
        list_id: str,
        session: UserSession = Depends(deps.require_session),
        completer: deps.ShoppingListCompleter = Depends(deps.get_shopping_list_completer),
    ) -> ShoppingList:
        try:
            return completer(list_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.delete("/shopping/lists/{list_id}", summary="Delete a shopping list")
    def shopping_lists_delete(
        list_id: str,
        session: UserSession = Depends(deps.require_session),
        deleter: deps.ShoppingListDeleter = Depends(deps.get_shopping_list_deleter),
    ) -> dict[str, bool]:
        try:
            deleter(list_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"success": True}

    @application.post(
        "/shopping/lists/{list_id}/items",
        response_model=ShoppingItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add an item to a shopping list",
    )
    def shopping_items_create(
        list_id: str,
        payload: ShoppingItemCreateRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        creator: deps.ShoppingItemCreator = Depends(deps.get_shopping_item_creator),
    ) -> ShoppingItem:
        create_payload = payload.model_dump()
        create_payload["added_by_id"] = session.user_id
        try:
            return creator(list_id, create_payload)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.patch(
        "/shopping/items/{item_id}/toggle",
        response_model=ShoppingItem,
        summary="Toggle an item's checked state",
    )
    def shopping_items_toggle(
        item_id: str,
        session: UserSession = Depends(deps.require_session),
        toggler: deps.ShoppingItemToggler = Depends(deps.get_shopping_item_toggler),
    ) -> ShoppingItem:
        try:
            return toggler(item_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.patch(
        "/shopping/items/{item_id}/name",
        response_model=ShoppingItem,
        summary="Rename a shopping list item",
    )
    def shopping_items_rename(
        item_id: str,
        payload: ShoppingItemRenameRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        renamer: deps.ShoppingItemRenamer = Depends(deps.get_shopping_item_renamer),
    ) -> ShoppingItem:
        try:
            return renamer(item_id, payload.name)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.delete("/shopping/items/{item_id}", summary="Delete a shopping list item")
    def shopping_items_delete(
        item_id: str,
        session: UserSession = Depends(deps.require_session),
        deleter: deps.ShoppingItemDeleter = Depends(deps.get_shopping_item_deleter),
    ) -> dict[str, bool]:
        try:
            deleter(item_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        return {"success": True}

    @application.get("/shopping/categories", summary="List grocery categories in display order")
    def shopping_categories(
        session: UserSession = Depends(deps.require_session),
        table: CategoryTable = Depends(deps.get_category_table_provider),
    ) -> dict[str, list[str]]:
        return {"categories": list(table.categories)}

    @application.get("/shopping/classify", summary="Infer the grocery category of an item name")
    def shopping_classify(
        name: str = Query(..., max_length=200),
        session: UserSession = Depends(deps.require_session),
        table: CategoryTable = Depends(deps.get_category_table_provider),
    ) -> dict[str, str]:
        return {"name": name, "category": table.classify(name)}

    @application.get("/timers", response_model=list[TimerView], summary="List timers")
    def timers_list(
        session: UserSession = Depends(deps.require_session),
        store: TimerStore = Depends(deps.get_timer_store),
    ) -> list[TimerView]:
        return [TimerView.from_timer(timer) for timer in store.list_timers()]

    @application.post(
        "/timers",
        response_model=TimerView,
        status_code=status.HTTP_201_CREATED,
        summary="Register a timer",
    )
    def timers_create(
        payload: TimerCreateRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        store: TimerStore = Depends(deps.get_timer_store),
    ) -> TimerView:
        timer = store.add(
            payload.id or uuid4().hex,
            payload.label,
            payload.duration_ms,
            recipe_id=payload.recipe_id,
        )
        return TimerView.from_timer(timer)

    @application.post(
        "/timers/{timer_id}/{action}",
        response_model=TimerView,
        summary="Start, pause or reset a timer",
    )
    def timers_action(
        timer_id: str,
        action: str,
        session: UserSession = Depends(deps.require_session),
        store: TimerStore = Depends(deps.get_timer_store),
    ) -> TimerView:
        handlers = {"start": store.start, "pause": store.pause, "reset": store.reset}
        handler = handlers.get(action)
        if handler is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown timer action '{action}'"
            )
        try:
            return TimerView.from_timer(handler(timer_id))
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.delete(
        "/timers/{timer_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove a timer",
    )
    def timers_delete(
        timer_id: str,
        session: UserSession = Depends(deps.require_session),
        store: TimerStore = Depends(deps.get_timer_store),
    ) -> None:
        try:
            store.remove(timer_id)
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    @application.get(
        "/preferences",
        response_model=AppPreferences,
        summary="Get the caller's client preferences",
    )
    def preferences_get(
        session: UserSession = Depends(deps.require_session),
        factory: deps.PreferencesContextFactory = Depends(deps.get_preferences_context_factory),
    ) -> AppPreferences:
        return factory(session.user_id).load()

    @application.put(
        "/preferences",
        response_model=AppPreferences,
        summary="Update the caller's client preferences",
    )
    def preferences_update(
        payload: PreferencesUpdateRequest = Body(...),
        session: UserSession = Depends(deps.require_session),
        factory: deps.PreferencesContextFactory = Depends(deps.get_preferences_context_factory),
    ) -> AppPreferences:
        changes = payload.model_dump(exclude_unset=True)
        if changes.get("task_view_mode") is None:
            changes.pop("task_view_mode", None)
        context = factory(session.user_id)
        context.load()
        return context.update(**changes)

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    return application


class ShoppingListCreateRequest(BaseModel):
    family_id: str = Field(alias="familyId", min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=100)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ShoppingListUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    notes: Optional[str] = Field(default=None)

    model_config = ConfigDict(str_strip_whitespace=True)


class ShoppingItemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    quantity: float = Field(default=1, gt=0)
    unit: Optional[str] = Field(default=None, max_length=64)
    source_recipe_id: Optional[str] = Field(default=None, alias="sourceRecipeId", max_length=36)
    notes: Optional[str] = Field(default=None)

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class ShoppingItemRenameRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)

    model_config = ConfigDict(str_strip_whitespace=True)


class TimerCreateRequest(BaseModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=64)
    label: str = Field(min_length=1, max_length=100)
    duration_ms: int = Field(alias="durationMs", gt=0)
    recipe_id: Optional[str] = Field(default=None, alias="recipeId")

    model_config = ConfigDict(populate_by_name=True)


class TimerView(Timer):
    live_remaining_ms: int
    display: str

    @classmethod
    def from_timer(cls, timer: Timer) -> "TimerView":
        remaining = live_remaining_ms(timer)
        return cls(
            **timer.model_dump(),
            live_remaining_ms=remaining,
            display=format_remaining(remaining),
        )


class PreferencesUpdateRequest(BaseModel):
    last_shopping_list_id: Optional[str] = Field(default=None, alias="lastShoppingListId")
    last_family_id: Optional[str] = Field(default=None, alias="lastFamilyId")
    task_view_mode: Optional[TaskViewMode] = Field(default=None, alias="taskViewMode")

    model_config = ConfigDict(populate_by_name=True)


ShoppingListCreateRequest.model_rebuild()
ShoppingListUpdateRequest.model_rebuild()
ShoppingItemCreateRequest.model_rebuild()
ShoppingItemRenameRequest.model_rebuild()
TimerCreateRequest.model_rebuild()
PreferencesUpdateRequest.model_rebuild()


app = create_app()

__all__ = ["app", "create_app"]
