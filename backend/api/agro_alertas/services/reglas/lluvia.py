"""Reglas de precipitación por predio."""
from __future__ import annotations

from typing import Optional

from ...dto.alertas import Prioridad
from .base import MensajeAlerta, RegistroReglas, ReglaUmbral

DOMINIO = "lluvia"


def crear_reglas_lluvia(
    *,
    dias_deficit: int = 30,
    mm_sequia_moderada: float = 50,
    mm_sequia_severa: float = 20,
    dias_exceso: int = 7,
    mm_exceso: float = 150,
    porcentaje_campania: float = 70,
    dias_sin_lluvia: int = 21,
) -> RegistroReglas:
    """Construye el catálogo de reglas de lluvia con los umbrales dados."""

    def mensaje_moderada(acumulado: float, dias: int) -> MensajeAlerta:
        return MensajeAlerta(
            titulo="⚠️ Sequía Moderada Detectada",
            descripcion=(
                f"Se registraron {acumulado:.1f}mm en los últimos {dias} días. "
                f"Se esperaban al menos {mm_sequia_moderada:g}mm."
            ),
            recomendacion=(
                "Considerar riego suplementario si es posible. "
                "Monitorear estado de cultivos y pasturas."
            ),
        )

    def mensaje_severa(acumulado: float, dias: int) -> MensajeAlerta:
        return MensajeAlerta(
            titulo="🚨 SEQUÍA SEVERA - Acción Urgente Requerida",
            descripcion=(
                f"CRÍTICO: Solo {acumulado:.1f}mm en los últimos {dias} días. "
                f"Déficit severo de {mm_sequia_moderada - acumulado:.1f}mm."
            ),
            recomendacion=(
                "Acción urgente: Implementar riego de emergencia, reducir carga animal, "
                "considerar suplementación. Evaluar pérdidas potenciales."
            ),
        )

    def mensaje_exceso(acumulado: float, dias: int) -> MensajeAlerta:
        return MensajeAlerta(
            titulo="💧 Exceso de Precipitaciones",
            descripcion=(
                f"Se registraron {acumulado:.1f}mm en solo {dias} días. Riesgo de encharcamiento."
            ),
            recomendacion=(
                "Verificar drenajes, evitar laboreo de suelos saturados, monitorear aparición "
                "de enfermedades fúngicas. Retrasar aplicaciones hasta que suelo drene."
            ),
        )

    def validar_campania(acumulado: Optional[float], promedio: Optional[float]) -> bool:
        if acumulado is None or not promedio:
            return False
        return acumulado / promedio * 100 < porcentaje_campania

    def mensaje_campania(acumulado: float, promedio: float) -> MensajeAlerta:
        porcentaje = acumulado / promedio * 100
        return MensajeAlerta(
            titulo="📊 Campaña Seca Detectada",
            descripcion=(
                f"Acumulado de campaña: {acumulado:.1f}mm ({porcentaje:.1f}% del promedio "
                f"histórico de {promedio:.1f}mm)"
            ),
            recomendacion=(
                "Ajustar expectativas de rendimiento. Considerar cultivos de ciclo corto o "
                "tolerantes a sequía. Revisar estrategia de siembra para próxima campaña."
            ),
        )

    def mensaje_dias(dias: int) -> MensajeAlerta:
        return MensajeAlerta(
            titulo="⏳ Período Prolongado Sin Lluvia",
            descripcion=f"Han transcurrido {dias} días sin precipitaciones significativas.",
            recomendacion=(
                "Monitorear humedad de suelo. Priorizar riego en cultivos críticos. "
                "Estar atento a pronóstico para planificar operaciones."
            ),
        )

    return RegistroReglas(
        DOMINIO,
        [
            ReglaUmbral(
                id="sequia_moderada",
                nombre="Sequía Moderada",
                descripcion=f"Menos de {mm_sequia_moderada:g}mm en {dias_deficit} días",
                prioridad=Prioridad.MEDIA,
                tipo="deficit_hidrico",
                validar=lambda acumulado: (
                    acumulado is not None and acumulado < mm_sequia_moderada
                ),
                generar_mensaje=mensaje_moderada,
                umbrales={"dias": dias_deficit, "mm_minimo": mm_sequia_moderada},
            ),
            ReglaUmbral(
                id="sequia_severa",
                nombre="Sequía Severa",
                descripcion="Déficit hídrico crítico",
                prioridad=Prioridad.ALTA,
                tipo="deficit_hidrico",
                validar=lambda acumulado: (
                    acumulado is not None and acumulado < mm_sequia_severa
                ),
                generar_mensaje=mensaje_severa,
                umbrales={"dias": dias_deficit, "mm_minimo": mm_sequia_severa},
            ),
            ReglaUmbral(
                id="exceso_agua",
                nombre="Exceso de Agua",
                descripcion="Precipitación excesiva en período corto",
                prioridad=Prioridad.MEDIA,
                tipo="exceso_agua",
                validar=lambda acumulado: (
                    acumulado is not None and acumulado > mm_exceso
                ),
                generar_mensaje=mensaje_exceso,
                umbrales={"dias": dias_exceso, "mm_maximo": mm_exceso},
            ),
            ReglaUmbral(
                id="campania_seca",
                nombre="Campaña Seca",
                descripcion=f"Acumulado de campaña por debajo del {porcentaje_campania:g}% del promedio histórico",
                prioridad=Prioridad.ALTA,
                tipo="campania_seca",
                validar=validar_campania,
                generar_mensaje=mensaje_campania,
                umbrales={"porcentaje": porcentaje_campania},
            ),
            ReglaUmbral(
                id="dias_sin_lluvia",
                nombre="Período Prolongado Sin Lluvia",
                descripcion="Muchos días consecutivos sin precipitaciones",
                prioridad=Prioridad.MEDIA,
                tipo="dias_sin_lluvia",
                validar=lambda dias: dias is not None and dias >= dias_sin_lluvia,
                generar_mensaje=mensaje_dias,
                umbrales={"dias": dias_sin_lluvia},
            ),
        ],
    )


REGLAS_LLUVIA = crear_reglas_lluvia()
