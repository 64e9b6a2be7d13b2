import asyncio
from datetime import date, timedelta

import pytest

from agro_alertas.dto.alertas import Prioridad
from agro_alertas.services.reglas import crear_reglas_pasturas
from agro_alertas.services.verificadores import VerificadorPasturas

HOY = date(2025, 10, 15)


@pytest.fixture()
def verificador(mediciones, alertas, reloj):
    return VerificadorPasturas(mediciones, alertas, reloj=reloj)


@pytest.fixture()
def predio(mediciones):
    return mediciones.agregar_predio()


def test_pastura_critica(verificador, mediciones, alertas, firm_id, predio):
    lote = mediciones.agregar_lote(predio, "Potrero 3", uso_suelo="ganadero")
    mediciones.cargar_pastura(lote, altura_cm=4, remanente_objetivo_cm=6)

    resultado = asyncio.run(verificador.verificar_lote(lote, firm_id))

    assert [a.regla_aplicada for a in resultado.alertas_creadas] == ["pastura_critica"]
    alerta = resultado.alertas_creadas[0]
    assert alerta.prioridad is Prioridad.ALTA
    assert alerta.titulo == "Pastura crítica en Potrero 3"
    assert alerta.premise_id == predio


def test_remanente_ausente_no_dispara(verificador, mediciones, alertas, firm_id, predio):
    lote = mediciones.agregar_lote(predio, uso_suelo="ganadero")
    mediciones.cargar_pastura(lote, altura_cm=4, remanente_objetivo_cm=None)

    resultado = asyncio.run(verificador.verificar_pastura_critica(lote, firm_id))

    assert not resultado.disparada


def test_medicion_nunca_realizada_en_lote_mixto(verificador, mediciones, alertas, firm_id, predio):
    lote = mediciones.agregar_lote(predio, "Potrero 1", uso_suelo="Mixto")

    asyncio.run(verificador.verificar_medicion_vencida(lote, firm_id))

    [alerta] = alertas.pendientes("medicion_vencida")
    assert alerta.titulo == "Medición nunca realizada: Potrero 1"
    assert alerta.metadata["dias_sin_medicion"] is None


def test_medicion_vencida(verificador, mediciones, alertas, firm_id, predio):
    lote = mediciones.agregar_lote(predio, "Potrero 2", uso_suelo="ganadero")
    mediciones.cargar_pastura(
        lote, fecha=HOY - timedelta(days=20), altura_cm=10, remanente_objetivo_cm=6
    )

    asyncio.run(verificador.verificar_lote(lote, firm_id))

    [alerta] = alertas.pendientes("medicion_vencida")
    assert "20 días" in alerta.descripcion
    assert "(25/09/2025)" in alerta.descripcion
    assert alerta.metadata["fecha_ultima_medicion"] == "2025-09-25"


def test_lote_agricola_no_requiere_medicion(verificador, mediciones, alertas, firm_id, predio):
    lote = mediciones.agregar_lote(predio, uso_suelo="agricola")

    asyncio.run(verificador.verificar_lote(lote, firm_id))

    assert alertas.pendientes() == []


def test_plazo_de_medicion_configurable(mediciones, alertas, firm_id, reloj, predio):
    verificador = VerificadorPasturas(
        mediciones, alertas, crear_reglas_pasturas(dias_medicion=30), reloj
    )
    lote = mediciones.agregar_lote(predio, uso_suelo="ganadero")
    mediciones.cargar_pastura(lote, fecha=HOY - timedelta(days=20), altura_cm=10)

    asyncio.run(verificador.verificar_medicion_vencida(lote, firm_id))

    assert alertas.pendientes() == []


def test_verificar_predio(verificador, mediciones, alertas, firm_id, predio):
    critico = mediciones.agregar_lote(predio, "A", uso_suelo="ganadero")
    sin_medicion = mediciones.agregar_lote(predio, "B", uso_suelo="ganadero")
    mediciones.cargar_pastura(critico, altura_cm=3, remanente_objetivo_cm=5)

    resultado = asyncio.run(verificador.verificar_predio(predio, firm_id))

    assert resultado.total_alertas == 2
    assert resultado.por_entidad == {str(critico): 1, str(sin_medicion): 1}
