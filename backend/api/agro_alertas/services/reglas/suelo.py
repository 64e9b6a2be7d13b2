"""Reglas de análisis de suelo."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...dto.alertas import Prioridad
from .base import (
    MensajeAlerta,
    RegistroReglas,
    ReglaUmbral,
    formatear_numero as fmt,
    porcentaje_del_objetivo,
)

DOMINIO = "suelo"

# Orden en que se evalúa el déficit de la fertilización pendiente.
ORDEN_FERTILIZACION: tuple[str, ...] = ("p", "k", "n")

REGLA_POR_NUTRIENTE: dict[str, str] = {
    "p": "deficit_fosforo",
    "k": "deficit_potasio",
    "n": "deficit_nitrogeno",
    "s": "deficit_azufre",
}


@dataclass(frozen=True)
class _TextoNutriente:
    nombre: str
    icono: str
    sin_fuente: str
    sufijo: str = " para corregir déficit."


_TEXTOS = {
    "p": _TextoNutriente(
        nombre="Fósforo",
        icono="🧪",
        sin_fuente="Realizar fertilización fosfatada según recomendación agronómica.",
    ),
    "k": _TextoNutriente(
        nombre="Potasio",
        icono="🧪",
        sin_fuente="Realizar fertilización potásica según recomendación agronómica.",
    ),
    "n": _TextoNutriente(
        nombre="Nitrógeno",
        icono="🌾",
        sin_fuente="Realizar fertilización nitrogenada. Considerar análisis foliar para ajustar dosis.",
        sufijo=". Considerar fraccionamiento de la dosis.",
    ),
    "s": _TextoNutriente(
        nombre="Azufre",
        icono="🧪",
        sin_fuente="Considerar fertilizantes con azufre (ej: sulfato de amonio, yeso agrícola).",
        sufijo=".",
    ),
}


def _regla_deficit(codigo: str, prioridad: Prioridad, porcentaje_minimo: float) -> ReglaUmbral:
    texto = _TEXTOS[codigo]

    def validar(resultado: Optional[float], objetivo: Optional[float]) -> bool:
        porcentaje = porcentaje_del_objetivo(resultado, objetivo)
        return porcentaje is not None and porcentaje < porcentaje_minimo

    def generar_mensaje(
        resultado: float,
        objetivo: float,
        fuente: Optional[str] = None,
        kg_ha: Optional[float] = None,
    ) -> MensajeAlerta:
        deficit = objetivo - resultado
        if fuente and kg_ha is not None:
            recomendacion = f"Aplicar {fuente} a razón de {fmt(kg_ha)} kg/ha{texto.sufijo}"
        elif fuente:
            recomendacion = f"Aplicar {fuente}{texto.sufijo}"
        else:
            recomendacion = texto.sin_fuente
        return MensajeAlerta(
            titulo=f"{texto.icono} Déficit de {texto.nombre} Detectado",
            descripcion=(
                f"Nivel actual: {fmt(resultado)} ppm. Objetivo: {fmt(objetivo)} ppm. "
                f"Déficit: {deficit:.1f} ppm."
            ),
            recomendacion=recomendacion,
        )

    return ReglaUmbral(
        id=REGLA_POR_NUTRIENTE[codigo],
        nombre=f"Déficit de {texto.nombre}",
        descripcion=f"Nivel de {texto.nombre.lower()} por debajo del objetivo",
        prioridad=prioridad,
        tipo=REGLA_POR_NUTRIENTE[codigo],
        validar=validar,
        generar_mensaje=generar_mensaje,
        umbrales={"porcentaje_minimo": porcentaje_minimo},
    )


def crear_reglas_suelo(
    *,
    porcentaje_minimo: float = 70,
    ph_minimo: float = 6.0,
    ph_maximo: float = 7.5,
    ph_objetivo_encalado: float = 6.5,
    kg_caco3_por_punto: float = 2000,
    mo_minima: float = 3.0,
    dias_fertilizacion: int = 30,
) -> RegistroReglas:
    """Construye el catálogo de reglas de suelo con los umbrales dados."""

    def validar_ph(ph: Optional[float]) -> bool:
        return ph is not None and (ph < ph_minimo or ph > ph_maximo)

    def mensaje_ph(ph: float) -> MensajeAlerta:
        if ph < ph_minimo:
            tipo = "ácido"
            dosis = (ph_objetivo_encalado - ph) * kg_caco3_por_punto
            recomendacion = (
                f"Suelo muy ácido (pH {fmt(ph)}). Aplicar enmienda calcárea para elevar pH. "
                f"Dosis aprox: {dosis:.0f} kg/ha de carbonato de calcio."
            )
        else:
            tipo = "alcalino"
            recomendacion = (
                f"Suelo alcalino (pH {fmt(ph)}). Considerar aplicación de azufre elemental "
                "o fertilizantes acidificantes."
            )
        return MensajeAlerta(
            titulo=f"⚗️ pH {tipo.upper()} - Acción Requerida",
            descripcion=(
                f"pH actual: {fmt(ph)}. Rango óptimo: {ph_minimo:.1f}-{ph_maximo:.1f}. "
                "Suelo fuera de rango óptimo."
            ),
            recomendacion=recomendacion,
        )

    def mensaje_mo(mo: float) -> MensajeAlerta:
        return MensajeAlerta(
            titulo="🍂 Materia Orgánica Baja",
            descripcion=(
                f"Contenido actual: {fmt(mo)}%. Mínimo recomendado: {mo_minima:.1f}%. "
                "Impacta en estructura, retención de agua y nutrientes."
            ),
            recomendacion=(
                "Implementar prácticas de conservación: rotación con leguminosas, manejo de "
                "rastrojos, aplicación de compost o abonos verdes. Evitar labranzas excesivas."
            ),
        )

    def mensaje_fertilizacion(
        dias: int,
        parametro: str,
        fuente: Optional[str] = None,
        kg_total: Optional[float] = None,
    ) -> MensajeAlerta:
        if fuente and kg_total:
            recomendacion = f"Aplicar {fmt(kg_total)} kg de {fuente} según recomendación técnica."
        else:
            recomendacion = f"Programar aplicación de fertilizante para corregir déficit de {parametro}."
        return MensajeAlerta(
            titulo="⏰ Fertilización Pendiente",
            descripcion=(
                f"Han pasado {dias} días desde el análisis de suelo. "
                f"Déficit de {parametro} aún sin corregir."
            ),
            recomendacion=recomendacion,
        )

    return RegistroReglas(
        DOMINIO,
        [
            _regla_deficit("p", Prioridad.ALTA, porcentaje_minimo),
            _regla_deficit("k", Prioridad.ALTA, porcentaje_minimo),
            _regla_deficit("n", Prioridad.ALTA, porcentaje_minimo),
            _regla_deficit("s", Prioridad.MEDIA, porcentaje_minimo),
            ReglaUmbral(
                id="ph_critico",
                nombre="pH Crítico",
                descripcion="pH fuera del rango óptimo",
                prioridad=Prioridad.ALTA,
                tipo="ph_critico",
                validar=validar_ph,
                generar_mensaje=mensaje_ph,
                umbrales={"min": ph_minimo, "max": ph_maximo},
            ),
            ReglaUmbral(
                id="baja_materia_organica",
                nombre="Baja Materia Orgánica",
                descripcion="Contenido de MO por debajo del mínimo recomendado",
                prioridad=Prioridad.MEDIA,
                tipo="baja_materia_organica",
                validar=lambda mo: mo is not None and mo < mo_minima,
                generar_mensaje=mensaje_mo,
                umbrales={"minimo": mo_minima},
            ),
            ReglaUmbral(
                id="fertilizacion_pendiente",
                nombre="Fertilización Pendiente",
                descripcion=f"Análisis con déficit sin aplicar por más de {dias_fertilizacion} días",
                prioridad=Prioridad.MEDIA,
                tipo="fertilizacion_pendiente",
                validar=lambda dias, aplicado: (
                    dias is not None and not aplicado and dias > dias_fertilizacion
                ),
                generar_mensaje=mensaje_fertilizacion,
                umbrales={"dias": dias_fertilizacion, "porcentaje_minimo": porcentaje_minimo},
            ),
        ],
    )


REGLAS_SUELO = crear_reglas_suelo()
