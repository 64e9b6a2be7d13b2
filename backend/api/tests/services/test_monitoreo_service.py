import asyncio
from datetime import date
from uuid import uuid4

import pytest

from agro_alertas.dto.alertas import EstadoAlerta
from agro_alertas.exceptions import (
    AlertaEstadoInvalidoError,
    AlertaNoEncontradaError,
    EntidadNoEncontradaError,
    EntidadNoSoportadaError,
)
from agro_alertas.services.monitoreo_service import MENSAJE_INCOMPLETA, MonitoreoAlertasService


@pytest.fixture()
def service(mediciones, alertas, reloj):
    return MonitoreoAlertasService(mediciones, alertas, reloj=reloj)


@pytest.fixture()
def escenario(mediciones):
    """Firma con un predio seco, un lote con déficit y pastura crítica y una semilla inviable."""
    predio = mediciones.agregar_predio()
    lote = mediciones.agregar_lote(predio, "Lote 1", uso_suelo="ganadero")
    variedad = mediciones.agregar_variedad()
    mediciones.cargar_lluvia(predio, date(2025, 9, 20), 10)
    mediciones.cargar_suelo(lote, p_resultado=5, p_objetivo=20)
    mediciones.cargar_pastura(lote, altura_cm=3, remanente_objetivo_cm=5)
    mediciones.cargar_semilla(variedad, germinacion=65)
    return {"predio": predio, "lote": lote, "variedad": variedad}


def test_verificar_todo_consolida_dominios(service, alertas, firm_id, escenario):
    resultado = asyncio.run(service.verificar_todo(firm_id))

    assert resultado.completa
    assert resultado.mensaje is None
    assert resultado.total_alertas == 5
    assert resultado.por_dominio == {"lluvia": 2, "suelo": 1, "pasturas": 1, "semillas": 1}
    assert len(alertas.pendientes()) == 5


def test_verificar_todo_es_idempotente(service, alertas, firm_id, escenario):
    asyncio.run(service.verificar_todo(firm_id))
    segundo = asyncio.run(service.verificar_todo(firm_id))

    assert segundo.total_alertas == 0
    assert segundo.completa
    assert len(alertas.pendientes()) == 5


def test_dominio_fallido_marca_verificacion_incompleta(service, alertas, firm_id, escenario):
    async def _falla(*args, **kwargs):
        raise RuntimeError("sin conexión")

    service.semillas.verificar_firma = _falla

    resultado = asyncio.run(service.verificar_todo(firm_id))

    assert not resultado.completa
    assert resultado.mensaje == MENSAJE_INCOMPLETA
    assert [(e.dominio, e.error) for e in resultado.errores] == [("semillas", "sin conexión")]
    assert resultado.total_alertas == 4
    assert "semilla_inviable" not in alertas.reglas_pendientes()


def test_verificar_todo_por_predio(service, mediciones, alertas, firm_id, escenario):
    otro = mediciones.agregar_predio("Otro")
    mediciones.cargar_lluvia(otro, date(2025, 9, 20), 10)

    resultado = asyncio.run(service.verificar_todo(firm_id, escenario["predio"]))

    assert resultado.por_dominio["lluvia"] == 2
    assert all(a.entidad_id != otro for a in alertas.pendientes())



def test_predio_fallido_no_descarta_los_demas(service, mediciones, alertas, firm_id):
    predio_a = mediciones.agregar_predio("A")
    mediciones.cargar_suelo(mediciones.agregar_lote(predio_a, "Lote A"), ph=5.0)
    predio_b = mediciones.agregar_predio("B")
    predio_c = mediciones.agregar_predio("C")
    mediciones.cargar_suelo(mediciones.agregar_lote(predio_c, "Lote C"), ph=5.0)

    listar_lotes = mediciones.listar_lotes

    async def _listar_lotes(premise_id):
        if premise_id == predio_b:
            raise RuntimeError("timeout")
        return await listar_lotes(premise_id)

    mediciones.listar_lotes = _listar_lotes

    resultado = asyncio.run(service.verificar_todo(firm_id))

    assert not resultado.completa
    assert resultado.mensaje == MENSAJE_INCOMPLETA
    assert resultado.por_dominio["suelo"] == 2
    assert resultado.total_alertas == len(alertas.pendientes()) == 2
    assert {(e.dominio, e.entidad_id) for e in resultado.errores} == {
        ("suelo", str(predio_b)),
        ("pasturas", str(predio_b)),
    }

def test_verificar_entidad_lote(service, alertas, firm_id, escenario):
    resultado = asyncio.run(service.verificar_entidad("lote", escenario["lote"], firm_id))

    assert resultado.por_dominio == {"suelo": 1, "pasturas": 1}
    assert alertas.reglas_pendientes() == {"deficit_fosforo", "pastura_critica"}


def test_verificar_entidad_variedad_y_predio(service, alertas, firm_id, escenario):
    variedad = asyncio.run(service.verificar_entidad("variedad", escenario["variedad"], firm_id))
    predio = asyncio.run(service.verificar_entidad("predio", escenario["predio"], firm_id))

    assert variedad.por_dominio == {"semillas": 1}
    assert predio.por_dominio == {"lluvia": 2}


def test_verificar_entidad_lote_inexistente(service, firm_id):
    with pytest.raises(EntidadNoEncontradaError):
        asyncio.run(service.verificar_entidad("lote", uuid4(), firm_id))



@pytest.mark.parametrize("entidad_tipo", ["variedad", "predio"])
def test_verificar_entidad_inexistente(service, firm_id, entidad_tipo):
    with pytest.raises(EntidadNoEncontradaError):
        asyncio.run(service.verificar_entidad(entidad_tipo, uuid4(), firm_id))


def test_verificar_entidad_lote_suma_fertilizacion_pendiente(service, mediciones, firm_id):
    predio = mediciones.agregar_predio()
    lote = mediciones.agregar_lote(predio)
    mediciones.cargar_suelo(lote, fecha=date(2025, 8, 1), p_resultado=5, p_objetivo=20)

    resultado = asyncio.run(service.verificar_entidad("lote", lote, firm_id))

    assert resultado.completa
    assert resultado.por_dominio == {"suelo": 2, "pasturas": 0}
    assert {a.regla_aplicada for a in resultado.alertas_creadas} == {
        "deficit_fosforo",
        "fertilizacion_pendiente",
    }


def test_fertilizacion_fallida_conserva_alertas_del_lote(service, alertas, firm_id, escenario):
    async def _falla(*args, **kwargs):
        raise RuntimeError("sin conexión")

    service.suelo.verificar_fertilizacion_pendiente = _falla

    resultado = asyncio.run(service.verificar_entidad("lote", escenario["lote"], firm_id))

    assert not resultado.completa
    assert resultado.mensaje == MENSAJE_INCOMPLETA
    assert resultado.total_alertas == 2
    [error] = resultado.errores
    assert (error.dominio, error.verificacion, error.entidad_id) == (
        "suelo",
        "fertilizacion_pendiente",
        str(escenario["lote"]),
    )

def test_verificar_entidad_tipo_no_soportado(service, firm_id):
    with pytest.raises(EntidadNoSoportadaError) as excinfo:
        asyncio.run(service.verificar_entidad("campo", uuid4(), firm_id))
    assert isinstance(excinfo.value, ValueError)


def test_resolver_libera_la_regla_para_una_nueva_alerta(service, alertas, firm_id, escenario):
    asyncio.run(service.verificar_entidad("variedad", escenario["variedad"], firm_id))
    [alerta] = alertas.pendientes("semilla_inviable")

    resuelta = asyncio.run(service.resolver_alerta(alerta.id, "Se reemplazó la semilla"))
    nueva = asyncio.run(service.verificar_entidad("variedad", escenario["variedad"], firm_id))

    assert resuelta.estado is EstadoAlerta.RESUELTA
    assert resuelta.resolved_notes == "Se reemplazó la semilla"
    assert resuelta.resolved_at is not None
    assert nueva.total_alertas == 1


def test_transiciones_invalidas(service, alertas, firm_id, escenario):
    asyncio.run(service.verificar_entidad("variedad", escenario["variedad"], firm_id))
    [alerta] = alertas.pendientes()

    descartada = asyncio.run(service.descartar_alerta(alerta.id, "Falso positivo"))

    assert descartada.estado is EstadoAlerta.DESCARTADA
    with pytest.raises(AlertaEstadoInvalidoError):
        asyncio.run(service.resolver_alerta(alerta.id))
    with pytest.raises(AlertaNoEncontradaError):
        asyncio.run(service.descartar_alerta(uuid4()))


def test_listar_alertas(service, firm_id, escenario):
    asyncio.run(service.verificar_todo(firm_id))

    pendientes = asyncio.run(service.listar_alertas(firm_id))
    de_otra_firma = asyncio.run(service.listar_alertas(uuid4()))

    assert len(pendientes) == 5
    assert de_otra_firma == []


def test_calcular_calidad_semilla():
    assert MonitoreoAlertasService.calcular_calidad_semilla(germinacion=60).calidad == 24
