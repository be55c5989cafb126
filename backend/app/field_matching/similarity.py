"""Deterministic string similarity helpers for field label matching."""

from __future__ import annotations

import re
from difflib import SequenceMatcher


_SEPARATOR_RE = re.compile(r"[_\-./:]+")
_NON_WORD_RE = re.compile(r"[^\w\s]")
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_label_text(value: str) -> str:
    """Normalize labels, names and ids for matching.

    ``firstName``, ``first_name`` and ``First Name:`` all normalize to
    ``first name``. Non-Latin scripts are kept as-is.
    """

    split_camel = _CAMEL_RE.sub(" ", value.strip())
    separated = _SEPARATOR_RE.sub(" ", split_camel.lower())
    cleaned = _NON_WORD_RE.sub(" ", separated)
    return _MULTISPACE_RE.sub(" ", cleaned).strip()


def token_set_similarity(left: str, right: str) -> float:
    """Return token overlap similarity in [0, 1]."""

    left_tokens = set(normalize_label_text(left).split())
    right_tokens = set(normalize_label_text(right).split())
    if not left_tokens or not right_tokens:
        return 0.0
    intersection = len(left_tokens & right_tokens)
    union = len(left_tokens | right_tokens)
    return intersection / union if union else 0.0


def string_similarity(left: str, right: str) -> float:
    """Composite deterministic similarity score."""

    norm_left = normalize_label_text(left)
    norm_right = normalize_label_text(right)
    if not norm_left or not norm_right:
        return 0.0
    if norm_left == norm_right:
        return 1.0
    sequence = SequenceMatcher(a=norm_left, b=norm_right).ratio()
    token = token_set_similarity(norm_left, norm_right)
    return max(sequence, token)
