"""API route handlers."""

import logging
import threading

from fastapi import APIRouter, Depends, HTTPException

from lv2hostconfig.api.dependencies import get_lock, get_settings, get_store
from lv2hostconfig.core.config import Settings
from lv2hostconfig.core.models import (
    EnvironmentResponse,
    ErrorResponse,
    EvaluateResponse,
    PluginsResponse,
    PluginView,
    SaveResponse,
    VariableSetRequest,
    VariableSetResponse,
)
from lv2hostconfig.core.store import ConfigurationStore
from lv2hostconfig.errors import DocumentError, HostConfigError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _error_detail(error: HostConfigError) -> dict:
    return ErrorResponse(
        error=str(error) if isinstance(error, DocumentError) else error.message,
        plugin_uri=error.plugin_uri,
        parameter=error.parameter,
        text=error.text,
    ).model_dump(mode="json")


def _evaluate(store: ConfigurationStore) -> EvaluateResponse:
    try:
        store.evaluate()
    except HostConfigError as e:
        raise HTTPException(status_code=422, detail=_error_detail(e)) from None

    return EvaluateResponse(
        plugins_count=store.count,
        parameters_count=store.parameters_count,
    )


@router.get("/plugins", response_model=PluginsResponse)
async def get_plugins(store: ConfigurationStore = Depends(get_store)):
    """Get all plugins with formatted and resolved parameter values."""
    return PluginsResponse(
        evaluated=store.evaluated,
        last_evaluation=store.last_evaluation,
        plugins=[PluginView.from_config(plugin) for plugin in store.plugins],
    )


@router.get(
    "/plugins/{plugin_uri:path}",
    response_model=PluginView,
    responses={404: {"model": ErrorResponse}},
)
async def get_plugin(plugin_uri: str, store: ConfigurationStore = Depends(get_store)):
    """Get one plugin by URI."""
    plugin = store.plugin(plugin_uri)
    if plugin is None:
        raise HTTPException(status_code=404, detail=f"Plugin {plugin_uri} not found")

    return PluginView.from_config(plugin)


@router.get("/environment", response_model=EnvironmentResponse)
async def get_environment(store: ConfigurationStore = Depends(get_store)):
    """Get numeric and textual environment variables."""
    variables = {
        name: value
        for name, value in list(store.environment.items())
        if isinstance(value, (int, float, str)) and not isinstance(value, bool)
    }
    return EnvironmentResponse(variables=variables)


@router.put(
    "/environment/{name}",
    response_model=VariableSetResponse,
    responses={400: {"model": ErrorResponse}},
)
def set_variable(
    name: str,
    request: VariableSetRequest,
    store: ConfigurationStore = Depends(get_store),
    lock: threading.Lock = Depends(get_lock),
):
    """Set an environment variable. Takes effect on the next evaluation."""
    if not name.isidentifier():
        raise HTTPException(status_code=400, detail=f"Invalid variable name: {name}")

    with lock:
        old_value = store.set_variable(name, request.value)
    logger.info("Variable %s set to %r", name, request.value)

    return VariableSetResponse(
        name=name,
        old_value=old_value if isinstance(old_value, (int, float, str)) else None,
        new_value=request.value,
    )


@router.post(
    "/evaluate",
    response_model=EvaluateResponse,
    responses={422: {"model": ErrorResponse}},
)
def evaluate(
    store: ConfigurationStore = Depends(get_store),
    lock: threading.Lock = Depends(get_lock),
):
    """Re-evaluate every parameter. On failure the previous values are kept."""
    with lock:
        return _evaluate(store)


@router.post(
    "/reload",
    response_model=EvaluateResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def reload(
    store: ConfigurationStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    lock: threading.Lock = Depends(get_lock),
):
    """Reload the config file and evaluate it."""
    with lock:
        try:
            store.load_file(settings.config_path)
        except DocumentError as e:
            raise HTTPException(status_code=400, detail=_error_detail(e)) from None

        return _evaluate(store)


@router.post(
    "/save",
    response_model=SaveResponse,
    responses={500: {"model": ErrorResponse}},
)
def save(
    store: ConfigurationStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
    lock: threading.Lock = Depends(get_lock),
):
    """Write the formatted parameter text back to the config file."""
    with lock:
        try:
            path = store.save_file(settings.config_path)
        except DocumentError as e:
            raise HTTPException(status_code=500, detail=_error_detail(e)) from None

    logger.info("Saved %d plugins to %s", store.count, path)
    return SaveResponse(path=str(path), plugins_count=store.count)


@router.get("/document")
async def get_document(store: ConfigurationStore = Depends(get_store)):
    """Get the serialized document (formatted text only)."""
    return store.serialize().model_dump(by_alias=True, exclude_none=True)
