"""Normalize scanned DOM fields and suggest profile fields for them."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from urllib.parse import urlsplit

from app.field_matching.patterns import FIELD_PATTERNS
from app.field_matching.similarity import normalize_label_text, string_similarity
from app.models.field_mapping import FieldMapping
from app.schemas.autofill import DetectedField, FieldContext

_TYPE_MISMATCH_PENALTY = 0.7
_FUZZY_PENALTY = 0.8
_FUZZY_THRESHOLD = 0.85

_PERSONAL_SECTIONS = ("personal", "个人信息", "個人信息")
_CONTACT_SECTIONS = ("contact", "联系", "聯繫")
_EDUCATION_SECTIONS = ("education", "教育", "學歷")


@dataclass(frozen=True, slots=True)
class FieldHint:
    """Advisory keyword-based guess; never used to pre-fill a mapping."""

    profile_field: str
    confidence: float
    reason: str


def normalize_domain(value: object) -> str | None:
    """Return the lowercase host of a bare host name or URL."""

    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    if not cleaned:
        return None
    if "://" not in cleaned:
        cleaned = f"//{cleaned}"
    try:
        host = urlsplit(cleaned).hostname
    except ValueError:
        return None
    return host or None


def build_selector(dom_id: str | None, name: str | None, tag: str, position: int) -> str:
    """Build the locator the browser extension would generate for a field."""

    if dom_id:
        return f"#{dom_id}"
    if name:
        escaped = name.replace('"', '\\"')
        return f'{tag}[name="{escaped}"]'
    return f"{tag}:nth-of-type({position + 1})"


def normalize_field(raw: object, position: int) -> DetectedField | None:
    """Turn one raw descriptor into a ``DetectedField``; non-objects yield ``None``."""

    if not isinstance(raw, dict):
        return None

    dom_id = _clean_text(raw.get("id"))
    name = _clean_text(raw.get("name"))
    placeholder = _clean_text(raw.get("placeholder"))
    aria_label = _clean_text(raw.get("ariaLabel", raw.get("aria_label")))
    label = _clean_text(raw.get("label")) or placeholder or name
    tag = (_clean_text(raw.get("tag")) or "input").lower()
    input_type = (_clean_text(raw.get("type")) or tag).lower()
    selector = _clean_text(raw.get("selector")) or build_selector(dom_id, name, tag, position)

    return DetectedField(
        id=dom_id or f"field_{position + 1}",
        dom_id=dom_id,
        label=label,
        name=name,
        placeholder=placeholder,
        aria_label=aria_label,
        tag=tag,
        type=input_type,
        selector=selector,
        position=position,
        context=_parse_context(raw.get("context")),
    )


def index_mappings(mappings: Iterable[FieldMapping]) -> dict[str, str]:
    """Map selector -> profile field for one user's mappings on one domain."""

    return {mapping.selector: mapping.profile_field for mapping in mappings}


def suggest_profile_field(field: DetectedField, mappings: Mapping[str, str]) -> str | None:
    """Exact selector lookup only; no stored mapping means no suggestion."""

    return mappings.get(field.selector)


def keyword_hint(field: DetectedField) -> FieldHint | None:
    """Guess a profile field from the field's visible text, then from its page context."""

    return _text_hint(field) or _context_hint(field)


def _text_hint(field: DetectedField) -> FieldHint | None:
    texts = [
        normalize_label_text(value)
        for value in (field.label, field.placeholder, field.name, field.id, field.aria_label)
        if value
    ]
    texts = [text for text in texts if text]
    if not texts:
        return None

    combined = " ".join(texts)
    for pattern in FIELD_PATTERNS:
        for keyword in pattern.keywords:
            if _contains_keyword(combined, normalize_label_text(keyword)):
                confidence = pattern.confidence
                if pattern.input_type and field.type != pattern.input_type:
                    confidence *= _TYPE_MISMATCH_PENALTY
                return FieldHint(pattern.profile_field, round(confidence, 4), "keyword_match")

    best: FieldHint | None = None
    for pattern in FIELD_PATTERNS:
        for keyword in pattern.keywords:
            if not keyword.isascii() or len(keyword) <= 3:
                continue
            score = max(string_similarity(text, keyword) for text in texts)
            if score < _FUZZY_THRESHOLD:
                continue
            confidence = round(pattern.confidence * _FUZZY_PENALTY, 4)
            if best is None or confidence > best.confidence:
                best = FieldHint(pattern.profile_field, confidence, "similarity_match")
    return best


def _context_hint(field: DetectedField) -> FieldHint | None:
    if field.context is None:
        return None

    section = (field.context.section or "").lower()
    nearby = [label.lower() for label in field.context.nearby_fields]
    text = (field.label or field.placeholder or "").lower()

    if field.type == "text" and any("email" in label for label in nearby):
        if any("last" in label or "family" in label for label in nearby):
            return FieldHint("given_name", 0.6, "context_match")
        if any("first" in label or "given" in label for label in nearby):
            return FieldHint("family_name", 0.6, "context_match")

    if _mentions(section, _PERSONAL_SECTIONS) and field.type == "text":
        if len(text) < 50 and "statement" not in text and "essay" not in text:
            return FieldHint("fullName", 0.5, "context_match")

    if _mentions(section, _CONTACT_SECTIONS):
        if field.type == "email":
            return FieldHint("email", 0.9, "context_match")
        if field.type == "tel":
            return FieldHint("phone", 0.85, "context_match")

    if _mentions(section, _EDUCATION_SECTIONS) and _mentions(text, ("school", "学校", "學校")):
        return FieldHint("school_name", 0.7, "context_match")
    return None


def match_fields(raw_fields: object, mappings: Iterable[FieldMapping] = ()) -> list[DetectedField]:
    """Normalize a scan in received order and attach suggestions and hints."""

    if not isinstance(raw_fields, list):
        return []

    known = index_mappings(mappings)
    detected: list[DetectedField] = []
    for position, raw in enumerate(raw_fields):
        field = normalize_field(raw, position)
        if field is None:
            continue
        field.suggested_profile_field = suggest_profile_field(field, known)
        hint = keyword_hint(field)
        if hint is not None:
            field.hint = hint.profile_field
            field.hint_confidence = hint.confidence
        detected.append(field)
    return detected


def _mentions(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def _parse_context(value: object) -> FieldContext | None:
    if not isinstance(value, dict):
        return None
    nearby = value.get("nearbyFields", value.get("nearby_fields"))
    if not isinstance(nearby, list):
        nearby = []
    return FieldContext(
        section=_clean_text(value.get("section")),
        nearby_fields=[label.strip() for label in nearby if isinstance(label, str) and label.strip()],
    )


def _contains_keyword(text: str, keyword: str) -> bool:
    if not keyword:
        return False
    if keyword.isascii():
        return f" {keyword} " in f" {text} "
    return keyword in text


def _clean_text(value: object) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if not isinstance(value, (str, int, float)):
        return None
    cleaned = str(value).strip()
    return cleaned or None
