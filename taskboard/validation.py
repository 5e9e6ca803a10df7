"""Input checks applied at the stores' public operations."""

from typing import Any, Iterable, Mapping, Optional

from taskboard.errors import ValidationError
from taskboard.models import TaskStatus


def clean_text(
    value: Optional[str],
    label: str,
    max_length: int,
    *,
    required: bool = False,
) -> Optional[str]:
    if value is None:
        if required:
            raise ValidationError(f"{label} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    value = value.strip()
    if required and not value:
        raise ValidationError(f"{label} cannot be empty")
    if len(value) > max_length:
        raise ValidationError(f"{label} cannot exceed {max_length} characters")
    return value


def coerce_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise ValidationError("Status must be either todo, inProgress, or done") from None


def check_patch(patch: Mapping[str, Any], allowed: Iterable[str]) -> None:
    unknown = sorted(set(patch) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")
