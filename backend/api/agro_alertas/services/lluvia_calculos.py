"""Cálculos puros sobre registros de lluvia."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

import pandas as pd

from ..dto.mediciones import RegistroLluvia
from ..dto.resumen import BalanceHidrico, DeficitHidrico, ExcesoHidrico

EVAPOTRANSPIRACION_DIARIA_MM = 5.0
UMBRAL_LLUVIA_SIGNIFICATIVA_MM = 1.0
ANIOS_HISTORICO = 5
MES_INICIO_CAMPANIA = 7


@dataclass(frozen=True)
class Campania:
    anio_inicio: int
    fecha_inicio: date
    fecha_fin: date

    @property
    def nombre(self) -> str:
        return f"{self.anio_inicio}/{self.anio_inicio + 1}"


def a_dataframe(registros: Iterable[RegistroLluvia]) -> pd.DataFrame:
    """Convierte registros a un DataFrame ``fecha``/``mm`` ordenado por fecha.

    Los milímetros ausentes o inválidos cuentan como 0.
    """
    filas = [{"fecha": r.fecha, "mm": r.mm} for r in registros if r.fecha is not None]
    df = pd.DataFrame(filas, columns=["fecha", "mm"])
    df["fecha"] = pd.to_datetime(df["fecha"])
    df["mm"] = pd.to_numeric(df["mm"], errors="coerce").fillna(0.0)
    return df.sort_values("fecha").reset_index(drop=True)


def filtrar_por_rango(df: pd.DataFrame, desde: Optional[date], hasta: Optional[date]) -> pd.DataFrame:
    mascara = pd.Series(True, index=df.index)
    if desde is not None:
        mascara &= df["fecha"] >= pd.Timestamp(desde)
    if hasta is not None:
        mascara &= df["fecha"] <= pd.Timestamp(hasta)
    return df[mascara]


def calcular_acumulado(
    registros: Iterable[RegistroLluvia] | pd.DataFrame,
    desde: Optional[date] = None,
    hasta: Optional[date] = None,
) -> float:
    """Suma de milímetros en el rango (extremos inclusive)."""
    df = registros if isinstance(registros, pd.DataFrame) else a_dataframe(registros)
    return float(filtrar_por_rango(df, desde, hasta)["mm"].sum())


def calcular_dias_sin_lluvia(
    registros: Iterable[RegistroLluvia] | pd.DataFrame,
    hoy: date,
    umbral_mm: float = UMBRAL_LLUVIA_SIGNIFICATIVA_MM,
) -> int:
    """Días desde la última lluvia significativa.

    Sin lluvias significativas cuenta desde el registro más antiguo; sin
    registros devuelve 0.
    """
    df = registros if isinstance(registros, pd.DataFrame) else a_dataframe(registros)
    if df.empty:
        return 0
    con_lluvia = df[df["mm"] >= umbral_mm]
    referencia = con_lluvia["fecha"].max() if not con_lluvia.empty else df["fecha"].min()
    return (pd.Timestamp(hoy) - referencia).days


def campania_de_fecha(fecha: date) -> Campania:
    """Campaña agrícola (julio a junio) que contiene la fecha."""
    anio = fecha.year if fecha.month >= MES_INICIO_CAMPANIA else fecha.year - 1
    return Campania(
        anio_inicio=anio,
        fecha_inicio=date(anio, MES_INICIO_CAMPANIA, 1),
        fecha_fin=date(anio + 1, 6, 30),
    )


def _restar_anios(fecha: date, anios: int) -> date:
    try:
        return fecha.replace(year=fecha.year - anios)
    except ValueError:
        # 29 de febrero en año no bisiesto
        return fecha.replace(year=fecha.year - anios, day=28)


def acumulados_historicos(
    registros: Iterable[RegistroLluvia] | pd.DataFrame,
    hoy: date,
    anios: int = ANIOS_HISTORICO,
) -> list[float]:
    """Acumulados del mismo tramo de campaña en los años anteriores.

    El tramo va del 1 de julio hasta el equivalente de ``hoy``. Los años sin
    ningún registro en el tramo no se consideran.
    """
    df = registros if isinstance(registros, pd.DataFrame) else a_dataframe(registros)
    campania = campania_de_fecha(hoy)
    acumulados = []
    for i in range(1, anios + 1):
        tramo = filtrar_por_rango(
            df, _restar_anios(campania.fecha_inicio, i), _restar_anios(hoy, i)
        )
        if not tramo.empty:
            acumulados.append(float(tramo["mm"].sum()))
    return acumulados


def promedio_historico(
    registros: Iterable[RegistroLluvia] | pd.DataFrame,
    hoy: date,
    anios: int = ANIOS_HISTORICO,
) -> Optional[float]:
    acumulados = acumulados_historicos(registros, hoy, anios)
    if not acumulados:
        return None
    return round(float(pd.Series(acumulados).mean()), 1)


def clasificar_deficit(acumulado: float, umbral_mm: float) -> DeficitHidrico:
    porcentaje = acumulado / umbral_mm * 100 if umbral_mm else 100.0
    if porcentaje >= 100:
        severidad = "NINGUNO"
    elif porcentaje >= 70:
        severidad = "LEVE"
    elif porcentaje >= 40:
        severidad = "MODERADO"
    else:
        severidad = "SEVERO"
    return DeficitHidrico(
        deficit_mm=round(max(umbral_mm - acumulado, 0.0), 1),
        porcentaje=round(porcentaje, 1),
        severidad=severidad,
    )


def clasificar_exceso(acumulado: float, umbral_mm: float) -> ExcesoHidrico:
    porcentaje = acumulado / umbral_mm * 100 - 100 if umbral_mm else 0.0
    if acumulado <= umbral_mm:
        severidad = "NINGUNO"
    elif porcentaje <= 20:
        severidad = "LEVE"
    elif porcentaje <= 50:
        severidad = "MODERADO"
    else:
        severidad = "SEVERO"
    return ExcesoHidrico(
        exceso_mm=round(max(acumulado - umbral_mm, 0.0), 1),
        porcentaje=round(porcentaje, 1),
        severidad=severidad,
    )


def calcular_balance_hidrico(
    precipitacion: float,
    evapotranspiracion: float = EVAPOTRANSPIRACION_DIARIA_MM,
    dias: int = 30,
) -> BalanceHidrico:
    evapo_total = evapotranspiracion * dias
    balance = precipitacion - evapo_total
    if balance > 50:
        estado = "EXCESO"
    elif balance >= -20:
        estado = "EQUILIBRIO"
    elif balance >= -50:
        estado = "DEFICIT_LEVE"
    else:
        estado = "DEFICIT_SEVERO"
    return BalanceHidrico(
        precipitacion_mm=round(precipitacion, 1),
        evapotranspiracion_mm=round(evapo_total, 1),
        balance_mm=round(balance, 1),
        estado=estado,
    )


def clasificar_campania(
    acumulado: Optional[float], promedio: Optional[float]
) -> tuple[str, Optional[float]]:
    """Clasifica la campaña frente al promedio histórico.

    Returns:
        Tupla (clasificación, porcentaje del promedio).
    """
    if acumulado is None or not promedio:
        return "SIN_DATOS", None
    porcentaje = acumulado / promedio * 100
    if porcentaje >= 110:
        clasificacion = "HUMEDA"
    elif porcentaje >= 90:
        clasificacion = "NORMAL"
    elif porcentaje >= 70:
        clasificacion = "SECA"
    else:
        clasificacion = "MUY_SECA"
    return clasificacion, round(porcentaje, 1)


def ventana(hoy: date, dias: int) -> tuple[date, date]:
    """Rango ``[hoy - dias, hoy]``."""
    return hoy - timedelta(days=dias), hoy
