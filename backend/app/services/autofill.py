"""Field detection and mapping save services."""

from __future__ import annotations

import logging
from time import perf_counter

from app.field_matching.matcher import match_fields, normalize_domain
from app.models.field_mapping import FieldMapping
from app.schemas.autofill import DetectedField, SaveMappingRequest
from app.services.errors import MappingStoreError, MappingValidationError
from app.services.mapping_store import MappingStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "domain, selector and profileField required"


def detect_fields(
    payload: object,
    *,
    store: MappingStore | None = None,
    user_id: str | None = None,
) -> list[DetectedField]:
    """Normalize a page scan; known mappings are attached when the caller is identified.

    An absent or malformed field list is an empty scan, not an error.
    """

    if not isinstance(payload, dict):
        return []
    raw_fields = payload.get("fields", payload.get("domFields"))
    if not isinstance(raw_fields, list):
        return []

    domain = normalize_domain(payload.get("domain"))
    mappings: list[FieldMapping] = []
    if store is not None and user_id is not None and domain is not None:
        try:
            mappings = store.find_by_user_and_domain(user_id, domain)
        except MappingStoreError:
            logger.warning(
                "autofill.detect_suggestions_unavailable user_id=%s domain=%s",
                user_id,
                domain,
            )

    detected = match_fields(raw_fields, mappings)
    logger.info(
        "autofill.fields_detected domain=%s received=%d detected=%d suggested=%d",
        domain,
        len(raw_fields),
        len(detected),
        sum(1 for field in detected if field.suggested_profile_field),
    )
    return detected


def save_mapping(store: MappingStore, user_id: str, payload: SaveMappingRequest) -> FieldMapping:
    """Validate and upsert one mapping for an authenticated user."""

    domain = normalize_domain(payload.domain)
    selector = _clean(payload.selector)
    profile_field = _clean(payload.profile_field)
    if domain is None or selector is None or profile_field is None:
        raise MappingValidationError(REQUIRED_FIELDS_MESSAGE)

    started = perf_counter()
    mapping = store.upsert(
        user_id,
        domain,
        selector,
        profile_field,
        dom_id=_clean(payload.dom_id),
        dom_name=_clean(payload.dom_name),
    )
    logger.info(
        "autofill.mapping_saved user_id=%s domain=%s selector=%s profile_field=%s total_ms=%.2f",
        user_id,
        domain,
        selector,
        profile_field,
        (perf_counter() - started) * 1000.0,
    )
    return mapping


def list_mappings(store: MappingStore, user_id: str, domain: str | None) -> list[FieldMapping]:
    """List a user's mappings for one site."""

    normalized = normalize_domain(domain)
    if normalized is None:
        raise MappingValidationError("domain required")
    return store.find_by_user_and_domain(user_id, normalized)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None
