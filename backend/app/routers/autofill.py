"""Autofill detection and field-mapping routes."""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import FileResponse
from pydantic import ValidationError

from app.config import Settings
from app.db.dependencies import (
    get_app_settings,
    get_current_user_id,
    get_mapping_store,
    get_optional_user_id,
)
from app.schemas.autofill import DetectedField, FieldMappingRead, SaveMappingRequest, SaveMappingResult
from app.schemas.common import ApiResponse
from app.services.autofill import REQUIRED_FIELDS_MESSAGE, detect_fields, list_mappings, save_mapping
from app.services.errors import AutofillDisabledError, MappingValidationError
from app.services.mapping_store import MappingStore

_MAPPING_UI = Path(__file__).resolve().parents[1] / "static" / "mapping.html"

router = APIRouter(prefix="/autofill")


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body, or ``None`` when it is empty or not JSON."""

    try:
        return await request.json()
    except ValueError:
        return None


def read_save_mapping_request(body: Any = Depends(read_json_body)) -> SaveMappingRequest:
    if not isinstance(body, dict):
        raise MappingValidationError(REQUIRED_FIELDS_MESSAGE)
    try:
        return SaveMappingRequest.model_validate(body)
    except ValidationError as exc:
        raise MappingValidationError(REQUIRED_FIELDS_MESSAGE, details=str(exc)) from exc


@router.post("/detect-fields", response_model=ApiResponse[list[DetectedField]])
def post_detect_fields(
    body: Any = Depends(read_json_body),
    user_id: str | None = Depends(get_optional_user_id),
    store: MappingStore = Depends(get_mapping_store),
    settings: Settings = Depends(get_app_settings),
) -> ApiResponse[list[DetectedField]]:
    """Normalize scanned DOM fields; identified callers also get saved suggestions."""

    if not settings.autofill_enabled:
        raise AutofillDisabledError()
    return ApiResponse(data=detect_fields(body, store=store, user_id=user_id))


@router.post("/mappings", response_model=SaveMappingResult)
def post_mapping(
    user_id: str = Depends(get_current_user_id),
    payload: SaveMappingRequest = Depends(read_save_mapping_request),
    store: MappingStore = Depends(get_mapping_store),
) -> SaveMappingResult:
    """Create or overwrite the caller's mapping for one field on one site."""

    mapping = save_mapping(store, user_id, payload)
    return SaveMappingResult(success=True, mapping=FieldMappingRead.model_validate(mapping))


@router.get("/mappings", response_model=ApiResponse[list[FieldMappingRead]])
def get_mappings(
    domain: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    store: MappingStore = Depends(get_mapping_store),
) -> ApiResponse[list[FieldMappingRead]]:
    """List the caller's saved mappings for one site."""

    records = list_mappings(store, user_id, domain)
    return ApiResponse(data=[FieldMappingRead.model_validate(record) for record in records])


@router.get("/mapping-ui", include_in_schema=False)
def mapping_ui() -> FileResponse:
    return FileResponse(_MAPPING_UI, media_type="text/html")
