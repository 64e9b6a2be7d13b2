from datetime import date
from uuid import uuid4

import pytest

from agro_alertas.dto.mediciones import RegistroLluvia
from agro_alertas.services import lluvia_calculos as calculos

HOY = date(2025, 10, 15)
PREDIO = uuid4()


def _registros(*pares):
    return [RegistroLluvia(premise_id=PREDIO, fecha=fecha, mm=mm) for fecha, mm in pares]


def test_acumulado_incluye_extremos_y_trata_invalidos_como_cero():
    registros = _registros(
        (date(2025, 10, 1), 10),
        (date(2025, 10, 5), "12,5"),
        (date(2025, 10, 10), None),
        (date(2025, 10, 15), "abc"),
        (date(2025, 9, 30), 100),
    )

    assert calculos.calcular_acumulado(registros, date(2025, 10, 1), HOY) == 22.5
    assert calculos.calcular_acumulado(registros) == 122.5
    assert calculos.calcular_acumulado([], date(2025, 10, 1), HOY) == 0.0


def test_dias_sin_lluvia_ignora_lluvias_menores_al_umbral():
    registros = _registros((date(2025, 9, 20), 8), (date(2025, 10, 10), 0.5))

    assert calculos.calcular_dias_sin_lluvia(registros, HOY) == 25


def test_dias_sin_lluvia_sin_lluvias_significativas_cuenta_desde_el_primer_registro():
    registros = _registros((date(2025, 9, 1), 0), (date(2025, 9, 10), 0.2))

    assert calculos.calcular_dias_sin_lluvia(registros, HOY) == 44
    assert calculos.calcular_dias_sin_lluvia([], HOY) == 0


@pytest.mark.parametrize(
    "fecha, nombre, inicio",
    [
        (date(2025, 3, 10), "2024/2025", date(2024, 7, 1)),
        (date(2025, 7, 1), "2025/2026", date(2025, 7, 1)),
        (date(2025, 6, 30), "2024/2025", date(2024, 7, 1)),
    ],
)
def test_campania_de_fecha(fecha, nombre, inicio):
    campania = calculos.campania_de_fecha(fecha)

    assert campania.nombre == nombre
    assert campania.fecha_inicio == inicio


def test_promedio_historico_usa_el_mismo_tramo_y_omite_anios_sin_datos():
    registros = _registros(
        (date(2024, 8, 1), 100),
        (date(2023, 8, 1), 200),
        (date(2024, 11, 1), 500),  # posterior al equivalente de hoy
        (date(2025, 8, 1), 50),  # campaña actual
    )

    assert calculos.acumulados_historicos(registros, HOY) == [100.0, 200.0]
    assert calculos.promedio_historico(registros, HOY) == 150.0
    assert calculos.promedio_historico(_registros((date(2025, 8, 1), 50)), HOY) is None


def test_restar_anios_en_29_de_febrero():
    assert calculos._restar_anios(date(2024, 2, 29), 1) == date(2023, 2, 28)


def test_clasificar_deficit():
    assert calculos.clasificar_deficit(50, 50).severidad == "NINGUNO"
    assert calculos.clasificar_deficit(40, 50).severidad == "LEVE"
    assert calculos.clasificar_deficit(25, 50).severidad == "MODERADO"

    severo = calculos.clasificar_deficit(10, 50)
    assert severo.severidad == "SEVERO"
    assert severo.deficit_mm == 40.0
    assert severo.porcentaje == 20.0


def test_clasificar_exceso():
    assert calculos.clasificar_exceso(100, 150).severidad == "NINGUNO"
    assert calculos.clasificar_exceso(100, 150).exceso_mm == 0.0
    assert calculos.clasificar_exceso(160, 150).severidad == "LEVE"
    assert calculos.clasificar_exceso(210, 150).severidad == "MODERADO"
    assert calculos.clasificar_exceso(300, 150).severidad == "SEVERO"


@pytest.mark.parametrize(
    "precipitacion, estado",
    [(250, "EXCESO"), (140, "EQUILIBRIO"), (100, "DEFICIT_LEVE"), (50, "DEFICIT_SEVERO")],
)
def test_balance_hidrico(precipitacion, estado):
    balance = calculos.calcular_balance_hidrico(precipitacion, dias=30)

    assert balance.evapotranspiracion_mm == 150.0
    assert balance.estado == estado


def test_clasificar_campania():
    assert calculos.clasificar_campania(115, 100) == ("HUMEDA", 115.0)
    assert calculos.clasificar_campania(95, 100) == ("NORMAL", 95.0)
    assert calculos.clasificar_campania(75, 100) == ("SECA", 75.0)
    assert calculos.clasificar_campania(60, 100) == ("MUY_SECA", 60.0)
    assert calculos.clasificar_campania(None, 100) == ("SIN_DATOS", None)
    assert calculos.clasificar_campania(100, 0) == ("SIN_DATOS", None)


def test_ventana():
    assert calculos.ventana(HOY, 30) == (date(2025, 9, 15), HOY)
