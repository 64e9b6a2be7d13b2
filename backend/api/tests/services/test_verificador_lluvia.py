import asyncio
from datetime import date

import pytest

from agro_alertas.dto.alertas import Prioridad
from agro_alertas.services.verificadores import VerificadorLluvia

HOY = date(2025, 10, 15)


@pytest.fixture()
def verificador(mediciones, alertas, reloj):
    return VerificadorLluvia(mediciones, alertas, reloj=reloj)


@pytest.fixture()
def predio(mediciones):
    return mediciones.agregar_predio()


def test_sequia_severa_tiene_precedencia(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia(predio, date(2025, 9, 20), 10)

    resultado = asyncio.run(verificador.verificar_predio(predio, firm_id))

    assert resultado.completa
    assert alertas.reglas_pendientes() == {"sequia_severa", "dias_sin_lluvia"}
    [severa] = alertas.pendientes("sequia_severa")
    assert severa.tipo == "deficit_hidrico"
    assert severa.prioridad is Prioridad.ALTA
    assert severa.entidad_tipo == "predio"
    assert severa.metadata["acumulado"] == 10.0
    assert severa.metadata["severidad"] == "SEVERA"
    assert alertas.pendientes("dias_sin_lluvia")[0].metadata["dias_sin_lluvia"] == 25


def test_sequia_moderada(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia_diaria(predio, date(2025, 9, 15), HOY, 1.5)

    resultado = asyncio.run(verificador.verificar_deficit_hidrico(predio, firm_id))

    assert resultado.medicion == 46.5
    [alerta] = resultado.alertas_creadas
    assert alerta.regla_aplicada == "sequia_moderada"
    assert alerta.prioridad is Prioridad.MEDIA
    assert "46.5mm" in alerta.descripcion


def test_exceso_de_agua(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia(predio, date(2025, 10, 10), 200)

    asyncio.run(verificador.verificar_predio(predio, firm_id))

    [alerta] = alertas.pendientes("exceso_agua")
    assert alerta.metadata["acumulado"] == 200.0
    assert alerta.metadata["severidad"] == "MODERADO"
    assert "sequia_moderada" not in alertas.reglas_pendientes()


def test_campania_seca_contra_promedio_historico(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia(predio, date(2024, 8, 1), 200)
    mediciones.cargar_lluvia(predio, date(2023, 8, 1), 200)
    mediciones.cargar_lluvia(predio, date(2025, 8, 1), 60)
    mediciones.cargar_lluvia(predio, date(2025, 10, 14), 60)

    resultado = asyncio.run(verificador.verificar_campania_seca(predio, firm_id))

    [alerta] = resultado.alertas_creadas
    assert alerta.metadata["acumulado_campania"] == 120.0
    assert alerta.metadata["promedio_historico"] == 200.0
    assert alerta.metadata["porcentaje"] == 60.0
    assert alerta.metadata["campania"] == "2025/2026"


def test_campania_sin_historico_no_dispara(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia(predio, date(2025, 8, 1), 5)

    resultado = asyncio.run(verificador.verificar_campania_seca(predio, firm_id))

    assert resultado.alertas_creadas == []


def test_predio_sin_registros_no_se_evalua(verificador, alertas, firm_id, predio):
    resultado = asyncio.run(verificador.verificar_predio(predio, firm_id))

    assert resultado.total_alertas == 0
    assert resultado.por_entidad == {str(predio): 0}
    assert alertas.intentos == 0


def test_segunda_pasada_no_crea_alertas(verificador, mediciones, alertas, firm_id, predio):
    mediciones.cargar_lluvia(predio, date(2025, 9, 1), 3)

    primero = asyncio.run(verificador.verificar_predio(predio, firm_id))
    segundo = asyncio.run(verificador.verificar_predio(predio, firm_id))

    assert primero.total_alertas == 2
    assert segundo.total_alertas == 0
    assert len(alertas.pendientes()) == 2
