"""Settings routes: PHP directives, WordPress constants, status, log, history, export.

Handlers are plain ``def``: the service blocks on php subprocess calls and file I/O,
so FastAPI runs them in its threadpool.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from ..core.directives import RECOMMENDED_VALUES
from ..core.schemas import (
    ActionResult,
    DirectiveStatus,
    ExtensionInventory,
    HistoryEntry,
    LogView,
    SettingsExport,
)
from ..services.settings_service import SettingsService, package_version
from .auth import AuthContext, get_auth_context, require_admin_permission
from .dependencies import get_service
from .schemas import (
    DebuggingUpdateRequest,
    HealthResponse,
    HistoryResponse,
    PhpSettingsResponse,
    PhpSettingsUpdateRequest,
    WpMemoryUpdateRequest,
)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/health", response_model=HealthResponse)
def health():
    """Liveness probe. No authentication."""
    return HealthResponse(status="healthy", version=package_version())


# ---- PHP directives ----


@router.get("/php", response_model=PhpSettingsResponse)
def get_php_settings(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    """Stored directive values with live status and recommended values."""
    return PhpSettingsResponse(
        settings=service.get_php_settings(),
        statuses=service.directive_status(),
        recommended={k: v for k, v in RECOMMENDED_VALUES.items() if k in service.keys},
    )


@router.put("/php", response_model=ActionResult)
def save_php_settings(
    body: PhpSettingsUpdateRequest,
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Save directives and regenerate .user.ini and php.ini."""
    return service.save_php_settings(auth.to_actor(), body.as_settings_map())


@router.post("/php/reset", response_model=ActionResult)
def reset_php_settings(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Save the recommended directive values."""
    return service.reset_php_settings(auth.to_actor())


@router.delete("/php/files", response_model=ActionResult)
def delete_ini_files(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Remove the generated .user.ini and php.ini."""
    return service.delete_ini_files(auth.to_actor())


@router.get("/status", response_model=list[DirectiveStatus])
def directive_status(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    return service.directive_status()


@router.get("/extensions", response_model=ExtensionInventory)
def extensions(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    return service.extensions()


# ---- WordPress constants ----


@router.get("/debugging", response_model=dict[str, bool])
def get_debugging(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    return service.get_debugging()


@router.put("/debugging", response_model=ActionResult)
def save_debugging(
    body: DebuggingUpdateRequest,
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Patch WP_DEBUG, WP_DEBUG_LOG, WP_DEBUG_DISPLAY and SCRIPT_DEBUG in wp-config.php."""
    return service.save_debugging(auth.to_actor(), body.model_dump())


@router.get("/wp-memory", response_model=dict[str, str])
def get_wp_memory(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    return service.get_wp_memory()


@router.put("/wp-memory", response_model=ActionResult)
def save_wp_memory(
    body: WpMemoryUpdateRequest,
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Patch WP_MEMORY_LIMIT and WP_MAX_MEMORY_LIMIT in wp-config.php."""
    return service.save_wp_memory(auth.to_actor(), body.model_dump())


# ---- Debug log ----


@router.get("/log", response_model=LogView)
def read_debug_log(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    return service.read_debug_log()


@router.delete("/log", response_model=ActionResult)
def clear_debug_log(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    return service.clear_debug_log(auth.to_actor())


# ---- History ----


@router.get("/history", response_model=HistoryResponse)
def history(
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    entries = service.history()
    return HistoryResponse(entries=entries, total=len(entries))


@router.get("/history/export", response_class=PlainTextResponse)
def export_history(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """History as CSV, one row per changed setting."""
    return PlainTextResponse(
        service.export_history_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="settings-history.csv"'},
    )


@router.get("/history/{index}", response_model=HistoryEntry)
def history_entry(
    index: int,
    auth: AuthContext = Depends(get_auth_context),
    service: SettingsService = Depends(get_service),
):
    return service.ledger.get(index)


@router.delete("/history", response_model=ActionResult)
def clear_history(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    return service.clear_history(auth.to_actor())


@router.post("/history/{index}/restore", response_model=ActionResult)
def restore_history(
    index: int,
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Revert the changes recorded in entry ``index`` (0 = most recent)."""
    return service.restore_history(auth.to_actor(), index)


# ---- Export / import ----


@router.get("/export", response_model=SettingsExport)
def export_settings(
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    return service.export_settings()


@router.post("/import", response_model=ActionResult)
def import_settings(
    document: Any = Body(...),
    auth: AuthContext = Depends(require_admin_permission),
    service: SettingsService = Depends(get_service),
):
    """Import an export document; current settings are backed up first."""
    return service.import_settings(auth.to_actor(), document)
