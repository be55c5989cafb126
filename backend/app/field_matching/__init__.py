"""Field detection normalization and profile-field matching."""

from app.field_matching.matcher import (
    FieldHint,
    build_selector,
    keyword_hint,
    match_fields,
    normalize_domain,
    normalize_field,
    suggest_profile_field,
)

__all__ = [
    "FieldHint",
    "build_selector",
    "keyword_hint",
    "match_fields",
    "normalize_domain",
    "normalize_field",
    "suggest_profile_field",
]
