"""
Validation of the asset admin forms (upload, edit, review, bulk upload).

Forms are plain mappings so the same rules serve the API request models
(`model_dump()`) and the CLI. Every validator returns a `ValidationResult`
with all errors found, never just the first one.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Any, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

from ..domain_models import ValidationError, ValidationResult
from . import constants as c

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _text(form: Mapping[str, Any], key: str) -> str:
    return str(form.get(key) or "")


def _check_common(form: Mapping[str, Any], errors: List[ValidationError]) -> None:
    """Rules shared by upload, edit and bulk forms."""
    description = _text(form, "description")
    if len(description) > 1000:
        errors.append(ValidationError("description", c.max_length_message(1000)))

    prompt = _text(form, "prompt")
    if len(prompt) > 2000:
        errors.append(ValidationError("prompt", c.max_length_message(2000)))

    personalization = form.get("personalization", "general")
    if personalization not in c.PERSONALIZATION_OPTIONS:
        errors.append(ValidationError("personalization", "Invalid personalization option"))

    if personalization == "personalized" and not _text(form, "child_name").strip():
        errors.append(ValidationError("child_name", "Child name is required for personalized assets"))

    template = form.get("template")
    if template and template not in c.TEMPLATES:
        errors.append(ValidationError("template", "Invalid template"))

    _check_number(form, "volume", c.VOLUME_RANGE, c.INVALID_VOLUME, errors)
    _check_number(form, "speed", c.SPEED_RANGE, c.INVALID_SPEED, errors)


def _check_number(
    form: Mapping[str, Any],
    key: str,
    bounds: Tuple[float, float],
    message: str,
    errors: List[ValidationError],
) -> None:
    """Missing is fine; anything present must be a number inside `bounds`."""
    value = form.get(key)
    if value is None:
        return
    try:
        number = float(value)
    except (TypeError, ValueError):
        errors.append(ValidationError(key, message))
        return
    if not bounds[0] <= number <= bounds[1]:
        errors.append(ValidationError(key, message))


def _check_theme(form: Mapping[str, Any], errors: List[ValidationError]) -> None:
    theme = _text(form, "theme")
    if not theme.strip():
        errors.append(ValidationError("theme", c.REQUIRED_FIELD))
    if len(theme) > 255:
        errors.append(ValidationError("theme", c.max_length_message(255)))


def validate_file_type(file_name: str, asset_type: str, content_type: Optional[str] = None) -> bool:
    """A known MIME type decides; otherwise the extension does."""
    if content_type and content_type in c.ALLOWED_MIME_TYPES.get(asset_type, ()):
        return True
    suffix = PurePosixPath(file_name.lower()).suffix
    return suffix in c.ALLOWED_FILE_EXTENSIONS.get(asset_type, ())


def validate_file_size(file_size: int, asset_type: str) -> bool:
    limit = c.MAX_FILE_SIZE.get(asset_type)
    return limit is not None and file_size <= limit


def validate_upload_form(
    form: Mapping[str, Any],
    file_name: Optional[str] = None,
    file_size: Optional[int] = None,
    content_type: Optional[str] = None,
) -> ValidationResult:
    errors: List[ValidationError] = []
    _check_theme(form, errors)

    asset_type = form.get("type")
    if asset_type not in c.ASSET_TYPES:
        errors.append(ValidationError("type", "Invalid asset type"))

    _check_common(form, errors)

    if file_name is not None and asset_type in c.ASSET_TYPES:
        if not validate_file_type(file_name, asset_type, content_type):
            errors.append(ValidationError("file", c.INVALID_FILE_TYPE))
        if file_size is not None and not validate_file_size(file_size, asset_type):
            max_mb = c.MAX_FILE_SIZE[asset_type] / c.MB
            errors.append(ValidationError("file", f"{c.FILE_TOO_LARGE} ({max_mb:.1f}MB)"))

    return ValidationResult.from_errors(errors)


def validate_edit_form(form: Mapping[str, Any]) -> ValidationResult:
    errors: List[ValidationError] = []
    _check_theme(form, errors)
    _check_common(form, errors)

    image_type = form.get("imageType")
    if image_type and image_type not in c.IMAGE_TYPES:
        errors.append(ValidationError("imageType", "Invalid image type"))

    aspect_ratio = form.get("aspectRatio")
    if aspect_ratio and aspect_ratio not in c.ASPECT_RATIOS:
        errors.append(ValidationError("aspectRatio", "Invalid aspect ratio"))

    safe_zone = form.get("safeZone")
    if safe_zone and safe_zone not in c.SAFE_ZONE_OPTIONS:
        errors.append(ValidationError("safeZone", "Invalid safe zone"))

    for key, limit in (("ageRange", 50), ("artStyle", 100), ("additionalContext", 500)):
        if len(_text(form, key)) > limit:
            errors.append(ValidationError(key, c.max_length_message(limit)))

    return ValidationResult.from_errors(errors)


def _as_zones(value: Any) -> List[Any]:
    # a single zone may arrive as a bare string
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value] if value else []


def validate_review_form(form: Mapping[str, Any]) -> ValidationResult:
    errors: List[ValidationError] = []
    zones = _as_zones(form.get("safe_zone"))

    if not zones:
        errors.append(ValidationError("safe_zone", "At least one safe zone must be selected"))

    for index, zone in enumerate(zones):
        if zone not in c.SAFE_ZONE_OPTIONS:
            errors.append(ValidationError(f"safe_zone[{index}]", "Invalid safe zone option"))

    for key in ("approval_notes", "rejection_reason"):
        if len(_text(form, key)) > 500:
            errors.append(ValidationError(key, c.max_length_message(500)))

    return ValidationResult.from_errors(errors)


def validate_bulk_upload_form(form: Mapping[str, Any], files: Iterable[str] = ()) -> ValidationResult:
    errors: List[ValidationError] = []
    if not list(files):
        errors.append(ValidationError("files", c.NO_FILES_SELECTED))
    _check_common(form, errors)
    return ValidationResult.from_errors(errors)


# ============================================================
# Field-level helpers
# ============================================================

def validate_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def validate_url(url: str) -> bool:
    parsed = urlparse(url)
    return bool(parsed.scheme and (parsed.netloc or parsed.path))


def validate_required(value: Any) -> bool:
    return value is not None and bool(str(value).strip())


def validate_length(value: str, minimum: Optional[int] = None, maximum: Optional[int] = None) -> Optional[ValidationError]:
    if minimum is not None and len(value) < minimum:
        return ValidationError("length", c.min_length_message(minimum))
    if maximum is not None and len(value) > maximum:
        return ValidationError("length", c.max_length_message(maximum))
    return None


def validate_range(value: float, minimum: float, maximum: float, field_name: str = "value") -> Optional[ValidationError]:
    if value < minimum or value > maximum:
        return ValidationError(field_name, f"{field_name} must be between {minimum} and {maximum}")
    return None


def get_field_error(errors: List[ValidationError], field_name: str) -> Optional[str]:
    for error in errors:
        if error.field == field_name:
            return error.message
    return None


def format_validation_errors(errors: List[ValidationError]) -> str:
    if not errors:
        return ""
    if len(errors) == 1:
        return errors[0].message
    return ", ".join(f"{e.field}: {e.message}" for e in errors)
