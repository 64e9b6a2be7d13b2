"""Puntaje de calidad general de un análisis de semillas."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from ..dto.resumen import CalidadSemilla
from ..utils.type_converters import as_float

PESO_GERMINACION = 40
PESO_PUREZA = 30
PESO_TETRAZOLIO = 15

# (humedad máxima inclusive, puntos)
ESCALONES_HUMEDAD: tuple[tuple[float, int], ...] = ((12, 15), (13, 10), (14, 5))

BANDAS: tuple[tuple[int, str, str, str], ...] = (
    (90, "EXCELENTE", "green", "Semilla de excelente calidad. Apta para siembra."),
    (80, "BUENA", "blue", "Semilla de buena calidad. Apta para siembra."),
    (70, "ACEPTABLE", "yellow", "Semilla de calidad aceptable. Considerar ajustes en densidad de siembra."),
    (60, "DEFICIENTE", "orange", "Semilla de calidad deficiente. No recomendado para siembra comercial."),
)
BANDA_INADECUADA = ("INADECUADA", "red", "Semilla inadecuada para siembra. Rechazar lote.")


def _puntos_humedad(humedad: float) -> int:
    for maximo, puntos in ESCALONES_HUMEDAD:
        if humedad <= maximo:
            return puntos
    return 0


def calcular_calidad(
    germinacion: Any = None,
    pureza: Any = None,
    humedad: Any = None,
    tetrazolio: Any = None,
) -> CalidadSemilla:
    """Calcula la calidad 0-100 ponderando los parámetros presentes.

    Solo suman los campos presentes; no se renormaliza por los ausentes.
    El puntaje se redondea a entero (mitades hacia arriba).

    Args:
        germinacion: Porcentaje de germinación (peso 40).
        pureza: Porcentaje de pureza (peso 30).
        humedad: Porcentaje de humedad, escalonado 15/10/5/0.
        tetrazolio: Viabilidad por tetrazolio (peso 15).

    Returns:
        CalidadSemilla con calidad, clasificación, color y mensaje.
    """
    germinacion, pureza, humedad, tetrazolio = (
        as_float(valor) for valor in (germinacion, pureza, humedad, tetrazolio)
    )

    puntaje = 0.0
    factores = 0
    if germinacion is not None:
        puntaje += germinacion / 100 * PESO_GERMINACION
        factores += 1
    if pureza is not None:
        puntaje += pureza / 100 * PESO_PUREZA
        factores += 1
    if humedad is not None:
        puntaje += _puntos_humedad(humedad)
        factores += 1
    if tetrazolio is not None:
        puntaje += tetrazolio / 100 * PESO_TETRAZOLIO
        factores += 1

    if factores == 0:
        return CalidadSemilla(
            calidad=None,
            clasificacion="SIN_DATOS",
            color="gray",
            mensaje="No hay datos suficientes para evaluar calidad",
        )

    calidad = int(Decimal(str(puntaje)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    for minimo, clasificacion, color, mensaje in BANDAS:
        if calidad >= minimo:
            break
    else:
        clasificacion, color, mensaje = BANDA_INADECUADA

    return CalidadSemilla(calidad=calidad, clasificacion=clasificacion, color=color, mensaje=mensaje)


def calidad_de_analisis(analisis: Optional[Any]) -> CalidadSemilla:
    """Atajo para calcular la calidad de un ``AnalisisSemilla`` (o None)."""
    if analisis is None:
        return calcular_calidad()
    return calcular_calidad(
        analisis.germinacion, analisis.pureza, analisis.humedad, analisis.tetrazolio
    )
