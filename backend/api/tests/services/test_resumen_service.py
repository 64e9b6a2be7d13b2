from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from agro_alertas.dto.alertas import Alerta, Prioridad
from agro_alertas.exceptions import EntidadNoEncontradaError
from agro_alertas.services.monitoreo_service import MonitoreoAlertasService
from agro_alertas.services.resumen_service import (
    ResumenEstadoService,
    contar_por_prioridad,
    ordenar_alertas,
)


@pytest.fixture
def anyio_backend():
    """Selecciona asyncio como backend para las pruebas asincronicas."""

    return "asyncio"


def _alerta(prioridad: Prioridad, minutos: int) -> Alerta:
    return Alerta(
        id=uuid4(),
        firm_id=uuid4(),
        entidad_tipo="lote",
        entidad_id=uuid4(),
        tipo="prueba",
        regla_aplicada="prueba",
        prioridad=prioridad,
        titulo="Prueba",
        descripcion="Prueba",
        created_at=datetime(2025, 10, 1, tzinfo=timezone.utc) + timedelta(minutes=minutos),
    )


def test_ordenar_alertas_por_prioridad_y_antiguedad():
    media_vieja = _alerta(Prioridad.MEDIA, 0)
    alta_vieja = _alerta(Prioridad.ALTA, 1)
    alta_nueva = _alerta(Prioridad.ALTA, 5)
    baja = _alerta(Prioridad.BAJA, 10)

    ordenadas = ordenar_alertas([media_vieja, baja, alta_vieja, alta_nueva])

    assert ordenadas == [alta_nueva, alta_vieja, media_vieja, baja]
    assert contar_por_prioridad(ordenadas) == {"alta": 2, "media": 1, "baja": 1}
    assert contar_por_prioridad([]) == {"alta": 0, "media": 0, "baja": 0}


@pytest.mark.anyio
async def test_resumen_de_firma(anyio_backend, mediciones, alertas, firm_id, reloj):
    predio = mediciones.agregar_predio()
    seco = mediciones.agregar_predio("Sin pluviómetro")
    lote = mediciones.agregar_lote(predio, uso_suelo="ganadero")
    variedad = mediciones.agregar_variedad()
    mediciones.cargar_lluvia(predio, date(2025, 9, 20), 10)
    mediciones.cargar_suelo(lote, ph=6.5, p_resultado=5, p_objetivo=20)
    mediciones.cargar_pastura(lote, altura_cm=8, remanente_objetivo_cm=5)
    mediciones.cargar_semilla(variedad, germinacion=90, pureza=99, humedad=11, tetrazolio=92)
    service = MonitoreoAlertasService(mediciones, alertas, reloj=reloj)
    await service.verificar_todo(firm_id)

    resumen = await service.obtener_resumen(firm_id)

    assert resumen.conteo_por_prioridad == {"alta": 2, "media": 1, "baja": 0}
    assert [a.prioridad for a in resumen.alertas_activas] == [
        Prioridad.ALTA,
        Prioridad.ALTA,
        Prioridad.MEDIA,
    ]
    assert resumen.suelo[str(lote)].ph == 6.5
    assert resumen.pasturas[str(lote)].altura_cm == 8
    assert resumen.semillas[str(variedad)].calidad.clasificacion == "EXCELENTE"
    assert str(seco) not in resumen.lluvia

    lluvia = resumen.lluvia[str(predio)]
    assert lluvia.acumulado_30_dias == 10.0
    assert lluvia.deficit.severidad == "SEVERO"
    assert lluvia.dias_sin_lluvia == 25
    assert lluvia.campania == "2025/2026"
    assert lluvia.clasificacion_campania == "SIN_DATOS"
    assert lluvia.balance_hidrico.estado == "DEFICIT_SEVERO"


@pytest.mark.anyio
async def test_resumen_de_predio_no_incluye_semillas(anyio_backend, mediciones, alertas, firm_id, reloj):
    predio = mediciones.agregar_predio()
    variedad = mediciones.agregar_variedad()
    mediciones.cargar_semilla(variedad, germinacion=90)
    service = ResumenEstadoService(mediciones, alertas, reloj=reloj)

    resumen = await service.construir_resumen(firm_id, predio)

    assert resumen.premise_id == predio
    assert resumen.semillas == {}
    assert resumen.lluvia == {}


@pytest.mark.anyio
async def test_resumen_de_lote(anyio_backend, mediciones, alertas, firm_id, reloj):
    predio = mediciones.agregar_predio()
    lote = mediciones.agregar_lote(predio)
    otro = mediciones.agregar_lote(predio, "Otro")
    mediciones.cargar_suelo(lote, mo=2)
    mediciones.cargar_suelo(otro, mo=1)
    service = MonitoreoAlertasService(mediciones, alertas, reloj=reloj)
    await service.verificar_todo(firm_id)

    resumen = await service.obtener_resumen(firm_id, lot_id=lote)

    assert resumen.lot_id == lote
    assert resumen.premise_id == predio
    assert [a.entidad_id for a in resumen.alertas_activas] == [lote]
    assert list(resumen.suelo) == [str(lote)]


@pytest.mark.anyio
async def test_resumen_de_lote_inexistente(anyio_backend, mediciones, alertas, firm_id, reloj):
    service = ResumenEstadoService(mediciones, alertas, reloj=reloj)

    with pytest.raises(EntidadNoEncontradaError):
        await service.resumen_lote(uuid4(), firm_id)
