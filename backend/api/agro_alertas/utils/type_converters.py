"""Conversores de tipos para sanitización de datos."""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID


def as_float(value: Any) -> Optional[float]:
    """Convierte un valor a float de forma segura.

    Acepta números, strings numéricos (admite coma decimal) y ``Decimal``.
    Strings vacíos, booleanos, NaN e infinitos se consideran ausentes.

    Args:
        value: Valor a convertir

    Returns:
        float si la conversión es exitosa, None en caso contrario
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


_VERDADEROS = frozenset({"true", "1", "si", "sí", "yes", "t", "s"})


def as_bool(value: Any) -> bool:
    """Interpreta banderas que pueden venir como texto ('true', 'si', '0'...).

    Cualquier valor no reconocido como verdadero se considera ``False``.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() in _VERDADEROS

def as_date(value: Any) -> Optional[date]:
    """Normaliza fechas y datetimes ISO a ``date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip()).date()
    except ValueError:
        return None


def coerce_uuid(value: str | UUID, *, field: str = "value") -> UUID:
    """Convierte y valida que un valor sea un UUID válido.

    Args:
        value: Valor a convertir (string o UUID)
        field: Nombre del campo para mensajes de error

    Returns:
        UUID válido

    Raises:
        ValueError: Si el valor no es un UUID válido
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError) as exc:
        raise ValueError(f"{field} debe ser un UUID válido") from exc
