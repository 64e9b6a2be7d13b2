"""Reglas de calidad de análisis de semillas."""
from __future__ import annotations

from typing import Optional

from ...dto.alertas import Prioridad
from .base import MensajeAlerta, RegistroReglas, ReglaUmbral, formatear_numero as fmt

DOMINIO = "semillas"


def _variedad(nombre: Optional[str], defecto: str = "Semilla") -> str:
    return nombre or defecto


def problemas_detectados(
    germinacion: Optional[float],
    pureza: Optional[float],
    humedad: Optional[float],
    tetrazolio: Optional[float],
    *,
    germinacion_minima: float = 85,
    pureza_minima: float = 98,
    humedad_maxima: float = 13,
    tetrazolio_minimo: float = 85,
) -> list[str]:
    """Lista los parámetros fuera de rango de un análisis."""
    problemas = []
    if germinacion is not None and germinacion < germinacion_minima:
        problemas.append("germinacion")
    if pureza is not None and pureza < pureza_minima:
        problemas.append("pureza")
    if humedad is not None and humedad > humedad_maxima:
        problemas.append("humedad")
    if tetrazolio is not None and tetrazolio < tetrazolio_minimo:
        problemas.append("tetrazolio")
    return problemas


def crear_reglas_semillas(
    *,
    germinacion_minima: float = 85,
    germinacion_critica: float = 70,
    germinacion_severa: float = 80,
    pureza_minima: float = 98,
    humedad_maxima: float = 13,
    tetrazolio_minimo: float = 85,
    diferencia_maxima: float = 10,
    problemas_minimos: int = 2,
) -> RegistroReglas:
    """Construye el catálogo de reglas de semillas con los umbrales dados."""

    def mensaje_germinacion(germinacion: float, variedad: Optional[str] = None) -> MensajeAlerta:
        if germinacion < germinacion_critica:
            severidad = "CRÍTICA"
            recomendacion = (
                "NO RECOMENDADO PARA SIEMBRA. Descartar lote o usar solo para ensayos. "
                "Solicitar semilla de reemplazo."
            )
        elif germinacion < germinacion_severa:
            severidad = "SEVERA"
            recomendacion = (
                "Aumentar densidad de siembra en 20-30% para compensar baja germinación. "
                "Evaluar costo-beneficio vs compra de nueva semilla."
            )
        else:
            severidad = "MODERADA"
            recomendacion = (
                "Aumentar densidad de siembra en 10-15%. Monitorear emergencia en campo "
                "y estar preparado para resiembra."
            )
        return MensajeAlerta(
            titulo=f"🌱 Germinación {severidad} - {_variedad(variedad)}",
            descripcion=(
                f"Germinación: {fmt(germinacion)}%. Mínimo recomendado: {fmt(germinacion_minima)}%. "
                f"Severidad: {severidad}."
            ),
            recomendacion=recomendacion,
        )

    def mensaje_inviable(germinacion: float, variedad: Optional[str] = None) -> MensajeAlerta:
        return MensajeAlerta(
            titulo=f"❌ SEMILLA INVIABLE - {_variedad(variedad, 'Análisis')}",
            descripcion=(
                f"Germinación: {fmt(germinacion)}%. CRÍTICO: Por debajo del umbral mínimo "
                f"de {fmt(germinacion_critica)}%."
            ),
            recomendacion=(
                "🚫 NO UTILIZAR para siembra comercial. Riesgo alto de fallas de implantación "
                "y pérdidas económicas. Solicitar devolución o reemplazo al proveedor."
            ),
        )

    def mensaje_pureza(pureza: float, variedad: Optional[str] = None) -> MensajeAlerta:
        if pureza < 95:
            recomendacion = (
                "Pureza muy baja. Verificar origen de semilla. Riesgo alto de malezas. "
                "Considerar rechazo del lote."
            )
        elif pureza < 97:
            recomendacion = (
                "Pureza por debajo del estándar. Aumentar vigilancia de malezas post-siembra. "
                "Ajustar densidad considerando impurezas."
            )
        else:
            recomendacion = (
                "Pureza ligeramente baja. Aceptable pero monitorear calidad en próximas compras."
            )
        return MensajeAlerta(
            titulo=f"🔍 Pureza Baja - {_variedad(variedad)}",
            descripcion=(
                f"Pureza: {fmt(pureza)}%. Impurezas: {100 - pureza:.1f}%. "
                f"Estándar mínimo: {fmt(pureza_minima)}%."
            ),
            recomendacion=recomendacion,
        )

    def mensaje_humedad(humedad: float, variedad: Optional[str] = None) -> MensajeAlerta:
        if humedad > 15:
            severidad = "CRÍTICA"
            recomendacion = (
                "URGENTE: Secar inmediatamente. Riesgo MUY ALTO de hongos y pérdida total "
                "del lote. No almacenar en estas condiciones."
            )
        elif humedad > 14:
            severidad = "ALTA"
            recomendacion = (
                "Secar antes de almacenar. Riesgo alto de deterioro por hongos. "
                "Reducir humedad a 12-13% máximo."
            )
        else:
            severidad = "MODERADA"
            recomendacion = (
                "Monitorear humedad durante almacenamiento. Idealmente reducir a 12% o menos "
                "para almacenamiento prolongado."
            )
        return MensajeAlerta(
            titulo=f"💧 Humedad {severidad} - {_variedad(variedad)}",
            descripcion=(
                f"Humedad: {fmt(humedad)}%. Máximo seguro: {fmt(humedad_maxima)}%. "
                "Riesgo de hongos y pérdida de viabilidad."
            ),
            recomendacion=recomendacion,
        )

    def mensaje_tetrazolio(tetrazolio: float, variedad: Optional[str] = None) -> MensajeAlerta:
        return MensajeAlerta(
            titulo=f"🔬 Baja Viabilidad (Test Tetrazolio) - {_variedad(variedad)}",
            descripcion=(
                f"Viabilidad: {fmt(tetrazolio)}%. El test de tetrazolio indica bajo potencial "
                "de germinación."
            ),
            recomendacion=(
                "Resultados de tetrazolio suelen ser más precisos que germinación estándar. "
                "Considerar no usar este lote o aumentar significativamente la densidad de siembra."
            ),
        )

    def mensaje_discrepancia(
        germinacion: float, tetrazolio: float, variedad: Optional[str] = None
    ) -> MensajeAlerta:
        diferencia = abs(germinacion - tetrazolio)
        return MensajeAlerta(
            titulo=f"⚠️ Discrepancia en Tests - {_variedad(variedad)}",
            descripcion=(
                f"Germinación: {fmt(germinacion)}%, Tetrazolio: {fmt(tetrazolio)}%. "
                f"Diferencia: {diferencia:.1f}%."
            ),
            recomendacion=(
                "Diferencia significativa entre tests. Repetir análisis para confirmar. "
                "Si tetrazolio es menor, considerar como referencia para decisión de siembra."
            ),
        )

    def mensaje_deteriorada(
        germinacion: Optional[float],
        pureza: Optional[float],
        humedad: Optional[float],
        variedad: Optional[str] = None,
    ) -> MensajeAlerta:
        return MensajeAlerta(
            titulo=f"⚠️ SEMILLA DETERIORADA - {_variedad(variedad, 'Análisis')}",
            descripcion=(
                f"Múltiples parámetros fuera de rango. Germinación: {fmt(germinacion)}%, "
                f"Pureza: {fmt(pureza)}%, Humedad: {fmt(humedad)}%."
            ),
            recomendacion=(
                "🚫 ALTO RIESGO: No recomendado para siembra. Semilla probablemente vieja, "
                "mal almacenada o de baja calidad. Contactar proveedor para devolución o reemplazo."
            ),
        )

    def deteriorada(germinacion, pureza, humedad, tetrazolio) -> bool:
        problemas = problemas_detectados(
            germinacion,
            pureza,
            humedad,
            tetrazolio,
            germinacion_minima=germinacion_minima,
            pureza_minima=pureza_minima,
            humedad_maxima=humedad_maxima,
            tetrazolio_minimo=tetrazolio_minimo,
        )
        return len(problemas) >= problemas_minimos

    return RegistroReglas(
        DOMINIO,
        [
            ReglaUmbral(
                id="baja_germinacion",
                nombre="Baja Germinación",
                descripcion="Porcentaje de germinación por debajo del mínimo aceptable",
                prioridad=Prioridad.ALTA,
                tipo="baja_germinacion",
                validar=lambda germinacion: germinacion is not None and germinacion < germinacion_minima,
                generar_mensaje=mensaje_germinacion,
                umbrales={"minimo": germinacion_minima},
            ),
            ReglaUmbral(
                id="semilla_inviable",
                nombre="Semilla Inviable",
                descripcion="Germinación crítica - semilla no apta para siembra",
                prioridad=Prioridad.ALTA,
                tipo="semilla_inviable",
                validar=lambda germinacion: germinacion is not None and germinacion < germinacion_critica,
                generar_mensaje=mensaje_inviable,
                umbrales={"critico": germinacion_critica},
            ),
            ReglaUmbral(
                id="baja_pureza",
                nombre="Baja Pureza",
                descripcion="Semilla contaminada con impurezas o malezas",
                prioridad=Prioridad.MEDIA,
                tipo="baja_pureza",
                validar=lambda pureza: pureza is not None and pureza < pureza_minima,
                generar_mensaje=mensaje_pureza,
                umbrales={"minimo": pureza_minima},
            ),
            ReglaUmbral(
                id="humedad_alta",
                nombre="Humedad Alta",
                descripcion="Humedad por encima del límite seguro para almacenamiento",
                prioridad=Prioridad.ALTA,
                tipo="humedad_alta",
                validar=lambda humedad: humedad is not None and humedad > humedad_maxima,
                generar_mensaje=mensaje_humedad,
                umbrales={"maximo": humedad_maxima},
            ),
            ReglaUmbral(
                id="baja_viabilidad_tetrazolio",
                nombre="Baja Viabilidad (Tetrazolio)",
                descripcion="Test de tetrazolio indica baja viabilidad",
                prioridad=Prioridad.ALTA,
                tipo="baja_viabilidad_tetrazolio",
                validar=lambda tetrazolio: tetrazolio is not None and tetrazolio < tetrazolio_minimo,
                generar_mensaje=mensaje_tetrazolio,
                umbrales={"minimo": tetrazolio_minimo},
            ),
            ReglaUmbral(
                id="discrepancia_tests",
                nombre="Discrepancia entre Tests",
                descripcion="Diferencia significativa entre germinación y tetrazolio",
                prioridad=Prioridad.MEDIA,
                tipo="discrepancia_tests",
                validar=lambda germinacion, tetrazolio: (
                    germinacion is not None
                    and tetrazolio is not None
                    and abs(germinacion - tetrazolio) > diferencia_maxima
                ),
                generar_mensaje=mensaje_discrepancia,
                umbrales={"diferencia": diferencia_maxima},
            ),
            ReglaUmbral(
                id="semilla_deteriorada",
                nombre="Semilla Posiblemente Deteriorada",
                descripcion="Múltiples indicadores de baja calidad",
                prioridad=Prioridad.ALTA,
                tipo="semilla_deteriorada",
                validar=deteriorada,
                generar_mensaje=mensaje_deteriorada,
                umbrales={
                    "problemas_minimos": problemas_minimos,
                    "germinacion_minima": germinacion_minima,
                    "pureza_minima": pureza_minima,
                    "humedad_maxima": humedad_maxima,
                    "tetrazolio_minimo": tetrazolio_minimo,
                },
            ),
        ],
    )


REGLAS_SEMILLAS = crear_reglas_semillas()
