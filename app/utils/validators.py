"""Deterministic validators and normalizers used across services."""

from __future__ import annotations

import re
import unicodedata

from app.core.exceptions import ValidationError

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")
_CODE_STRIP = re.compile(r"[^A-Za-z0-9]")


def sanitize_text(value: str | None, max_len: int = 20000) -> str:
    """Sanitize free-form content before persistence/display."""
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    cleaned = cleaned[:max_len]
    return cleaned


def strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_slug(value: str | None) -> str:
    """Lower-case, accent-free, underscore separated: "Contato Inicial" -> "contato_inicial"."""
    slug = _SLUG_SEPARATORS.sub("_", strip_accents(sanitize_text(value)).lower()).strip("_")
    if not slug:
        raise ValidationError("Slug must contain at least one letter or digit")
    return slug[:100]


def normalize_code(value: str | None) -> str:
    """Upper-case alphanumerics only, accents removed."""
    return _CODE_STRIP.sub("", strip_accents(sanitize_text(value))).upper()


def require_text(value: str | None, field: str, max_len: int = 255) -> str:
    cleaned = sanitize_text(value, max_len=max_len)
    if not cleaned:
        raise ValidationError(f"{field} must not be blank")
    return cleaned
