from __future__ import annotations

from typing import Any, Optional

from ..core.constants import VALID_DEVICE_IDS
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} inválido")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} deve ter no mínimo {min_len} caracteres")
    return value


def require_device_id(value: Any) -> int:
    try:
        device_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("catraca_id inválido (deve ser 1 ou 2)") from None
    if device_id not in VALID_DEVICE_IDS:
        raise ValidationError("catraca_id inválido (deve ser 1 ou 2)")
    return device_id


def optional_device_id(value: Any) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return require_device_id(value)
