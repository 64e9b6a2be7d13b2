"""Configuración global para tests."""
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from uuid import UUID, uuid4

import pytest

# Agregar raíz del paquete al path de Python
_resolved = Path(__file__).resolve()
_parents = _resolved.parents
if len(_parents) > 1:
    ROOT_DIR = _parents[1]
else:
    ROOT_DIR = _parents[-1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from agro_alertas.dto.alertas import Alerta, EstadoAlerta, NuevaAlerta  # noqa: E402
from agro_alertas.dto.mediciones import (  # noqa: E402
    AnalisisSemilla,
    AnalisisSuelo,
    LoteInfo,
    MedicionPastura,
    PredioInfo,
    RegistroLluvia,
    VariedadInfo,
)
from agro_alertas.exceptions import (  # noqa: E402
    AlertaEstadoInvalidoError,
    AlertaNoEncontradaError,
)

HOY = date(2025, 10, 15)


class _FakeMedicionRepository:
    """Mediciones en memoria con la misma interfaz que ``MedicionRepository``."""

    def __init__(self, firm_id: UUID):
        self.firm_id = firm_id
        self.predios: dict[UUID, PredioInfo] = {}
        self.lotes: dict[UUID, LoteInfo] = {}
        self.variedades: dict[UUID, VariedadInfo] = {}
        self.suelo: dict[UUID, AnalisisSuelo] = {}
        self.semillas: dict[UUID, AnalisisSemilla] = {}
        self.pasturas: dict[UUID, MedicionPastura] = {}
        self.lluvias: dict[UUID, list[RegistroLluvia]] = {}

    # Carga de datos

    def agregar_predio(self, nombre: str = "La Esperanza") -> UUID:
        predio = PredioInfo(id=uuid4(), nombre=nombre, firm_id=self.firm_id)
        self.predios[predio.id] = predio
        return predio.id

    def agregar_lote(self, premise_id: UUID, nombre: str = "Lote Norte", uso_suelo=None) -> UUID:
        lote = LoteInfo(
            id=uuid4(),
            nombre=nombre,
            firm_id=self.firm_id,
            premise_id=premise_id,
            uso_suelo=uso_suelo,
        )
        self.lotes[lote.id] = lote
        return lote.id

    def agregar_variedad(self, nombre: str = "DM 46R18") -> UUID:
        variedad = VariedadInfo(id=uuid4(), nombre=nombre, firm_id=self.firm_id)
        self.variedades[variedad.id] = variedad
        return variedad.id

    def cargar_suelo(self, lot_id: UUID, **campos) -> AnalisisSuelo:
        campos.setdefault("fecha", HOY)
        analisis = AnalisisSuelo(lot_id=lot_id, **campos)
        self.suelo[lot_id] = analisis
        return analisis

    def cargar_semilla(self, seed_variety_id: UUID, **campos) -> AnalisisSemilla:
        campos.setdefault("fecha", HOY)
        analisis = AnalisisSemilla(seed_variety_id=seed_variety_id, **campos)
        self.semillas[seed_variety_id] = analisis
        return analisis

    def cargar_pastura(self, lot_id: UUID, **campos) -> MedicionPastura:
        campos.setdefault("fecha", HOY)
        medicion = MedicionPastura(lot_id=lot_id, **campos)
        self.pasturas[lot_id] = medicion
        return medicion

    def cargar_lluvia(self, premise_id: UUID, fecha: date, mm) -> None:
        self.lluvias.setdefault(premise_id, []).append(
            RegistroLluvia(premise_id=premise_id, fecha=fecha, mm=mm)
        )

    def cargar_lluvia_diaria(self, premise_id: UUID, desde: date, hasta: date, mm) -> None:
        dia = desde
        while dia <= hasta:
            self.cargar_lluvia(premise_id, dia, mm)
            dia += timedelta(days=1)

    # Interfaz de lectura

    async def ultimo_analisis_suelo(self, lot_id):
        return self.suelo.get(lot_id)

    async def ultimo_analisis_semilla(self, seed_variety_id):
        return self.semillas.get(seed_variety_id)

    async def ultima_medicion_pastura(self, lot_id):
        return self.pasturas.get(lot_id)

    async def registros_lluvia(self, premise_id, desde=None, hasta=None):
        return sorted(
            (
                registro
                for registro in self.lluvias.get(premise_id, [])
                if (desde is None or registro.fecha >= desde)
                and (hasta is None or registro.fecha <= hasta)
            ),
            key=lambda registro: registro.fecha,
        )

    async def ultimo_registro_lluvia(self, premise_id):
        registros = self.lluvias.get(premise_id, [])
        return max(registros, key=lambda registro: registro.fecha) if registros else None

    async def obtener_lote(self, lot_id):
        return self.lotes.get(lot_id)

    async def obtener_variedad(self, seed_variety_id):
        return self.variedades.get(seed_variety_id)

    async def obtener_predio(self, premise_id):
        return self.predios.get(premise_id)

    async def listar_lotes(self, premise_id):
        return sorted(
            (lote for lote in self.lotes.values() if lote.premise_id == premise_id),
            key=lambda lote: lote.nombre,
        )

    async def listar_variedades(self, firm_id):
        return [v for v in self.variedades.values() if v.firm_id == firm_id]

    async def listar_predios(self, firm_id):
        return [p for p in self.predios.values() if p.firm_id == firm_id]


class _FakeAlertaRepository:
    """Almacén de alertas en memoria con deduplicación de pendientes."""

    def __init__(self):
        self.alertas: dict[UUID, Alerta] = {}
        self.intentos = 0

    def pendientes(self, regla_aplicada=None) -> list[Alerta]:
        return [
            alerta
            for alerta in self.alertas.values()
            if alerta.estado is EstadoAlerta.PENDIENTE
            and (regla_aplicada is None or alerta.regla_aplicada == regla_aplicada)
        ]

    def reglas_pendientes(self) -> set[str]:
        return {alerta.regla_aplicada for alerta in self.pendientes()}

    async def buscar_pendiente(self, *, entidad_tipo, entidad_id, regla_aplicada):
        for alerta in self.pendientes(regla_aplicada):
            if alerta.entidad_tipo == entidad_tipo and str(alerta.entidad_id) == str(entidad_id):
                return alerta
        return None

    async def crear_si_no_existe(self, nueva: NuevaAlerta):
        self.intentos += 1
        existente = await self.buscar_pendiente(
            entidad_tipo=nueva.entidad_tipo,
            entidad_id=nueva.entidad_id,
            regla_aplicada=nueva.regla_aplicada,
        )
        if existente is not None:
            return None
        alerta = Alerta(
            id=uuid4(),
            created_at=datetime.now(timezone.utc),
            **nueva.model_dump(),
        )
        self.alertas[alerta.id] = alerta
        return alerta

    async def _cerrar(self, alerta_id, estado: EstadoAlerta, notas):
        alerta = self.alertas.get(alerta_id)
        if alerta is None:
            raise AlertaNoEncontradaError(alerta_id)
        if alerta.estado is not EstadoAlerta.PENDIENTE:
            raise AlertaEstadoInvalidoError(alerta_id, alerta.estado.value)
        cerrada = alerta.model_copy(
            update={
                "estado": estado,
                "resolved_at": datetime.now(timezone.utc),
                "resolved_notes": notas,
            }
        )
        self.alertas[alerta_id] = cerrada
        return cerrada

    async def resolver(self, alerta_id, notas=None):
        return await self._cerrar(alerta_id, EstadoAlerta.RESUELTA, notas)

    async def descartar(self, alerta_id, motivo=None):
        return await self._cerrar(alerta_id, EstadoAlerta.DESCARTADA, motivo)

    async def listar_pendientes(
        self, *, firm_id, premise_id=None, tipos=None, entidad_tipo=None, entidad_id=None
    ):
        return [
            alerta
            for alerta in self.pendientes()
            if alerta.firm_id == firm_id
            and (premise_id is None or alerta.premise_id == premise_id)
            and (not tipos or alerta.tipo in tipos)
            and (entidad_tipo is None or alerta.entidad_tipo == entidad_tipo)
            and (entidad_id is None or alerta.entidad_id == entidad_id)
        ]


@pytest.fixture()
def firm_id() -> UUID:
    return uuid4()


@pytest.fixture()
def mediciones(firm_id) -> _FakeMedicionRepository:
    return _FakeMedicionRepository(firm_id)


@pytest.fixture()
def alertas() -> _FakeAlertaRepository:
    return _FakeAlertaRepository()


@pytest.fixture()
def reloj():
    return lambda: HOY
