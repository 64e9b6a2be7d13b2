"""Reglas de altura de pastura en lotes."""
from __future__ import annotations

from datetime import date
from typing import Optional

from ...dto.alertas import Prioridad
from .base import MensajeAlerta, RegistroReglas, ReglaUmbral, formatear_numero as fmt

DOMINIO = "pasturas"

USOS_GANADEROS: frozenset[str] = frozenset({"ganadero", "mixto"})


def crear_reglas_pasturas(*, dias_medicion: int = 14) -> RegistroReglas:
    """Construye el catálogo de reglas de pasturas."""

    def validar_critica(altura: Optional[float], remanente: Optional[float]) -> bool:
        if altura is None or not remanente:
            return False
        return altura < remanente

    def mensaje_critica(altura: float, remanente: float, lote: str) -> MensajeAlerta:
        return MensajeAlerta(
            titulo=f"Pastura crítica en {lote}",
            descripcion=(
                f"La altura actual ({fmt(altura)} cm) está por debajo del remanente "
                f"objetivo ({fmt(remanente)} cm)."
            ),
            recomendacion="Se recomienda cambiar animales a otro lote o ajustar la carga.",
        )

    def validar_vencida(uso_suelo: Optional[str], dias: Optional[int]) -> bool:
        if (uso_suelo or "").lower() not in USOS_GANADEROS:
            return False
        return dias is None or dias > dias_medicion

    def mensaje_vencida(
        dias: Optional[int], lote: str, fecha: Optional[date] = None
    ) -> MensajeAlerta:
        if dias is None:
            return MensajeAlerta(
                titulo=f"Medición nunca realizada: {lote}",
                descripcion="Este lote nunca ha tenido una medición de pastura registrada.",
                recomendacion=(
                    "Se recomienda realizar medición inicial para establecer línea base "
                    "de altura de pastura."
                ),
            )
        fecha_texto = fecha.strftime("%d/%m/%Y") if fecha else "sin fecha"
        return MensajeAlerta(
            titulo=f"Medición vencida en {lote}",
            descripcion=(
                f"Han transcurrido {dias} días desde la última medición ({fecha_texto})."
            ),
            recomendacion=(
                "Se recomienda realizar nueva medición de altura de pastura para actualizar "
                "información de disponibilidad forrajera."
            ),
        )

    return RegistroReglas(
        DOMINIO,
        [
            ReglaUmbral(
                id="pastura_critica",
                nombre="Pastura Crítica",
                descripcion="Altura de pastura por debajo del remanente objetivo",
                prioridad=Prioridad.ALTA,
                tipo="pastura_critica",
                validar=validar_critica,
                generar_mensaje=mensaje_critica,
            ),
            ReglaUmbral(
                id="medicion_vencida",
                nombre="Medición de Pastura Vencida",
                descripcion="Lote ganadero sin medición de pastura reciente",
                prioridad=Prioridad.MEDIA,
                tipo="medicion_vencida",
                validar=validar_vencida,
                generar_mensaje=mensaje_vencida,
                umbrales={"dias": dias_medicion},
            ),
        ],
    )


REGLAS_PASTURAS = crear_reglas_pasturas()
