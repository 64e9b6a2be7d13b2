"""Run the monitoring alert checks for a firm on a fixed polling interval.

Usage:
    python -m agro_alertas.scripts.verificar_alertas --firm-id <uuid> [--premise-id <uuid>]
        [--intervalo 60] [--una-vez]
"""
from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence
from uuid import UUID

from agro_alertas.core.config import get_settings
from agro_alertas.core.logging import get_logger
from agro_alertas.db.repositories.alerta_repository import AlertaRepository
from agro_alertas.db.repositories.medicion_repository import MedicionRepository
from agro_alertas.db.session import get_engine, get_session_factory
from agro_alertas.dependencies import crear_monitoreo_service
from agro_alertas.services.monitoreo_service import MonitoreoAlertasService

logger = get_logger("verificar_alertas")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verificación periódica de alertas de monitoreo")
    parser.add_argument("--firm-id", type=UUID, required=True, help="Firma a verificar")
    parser.add_argument("--premise-id", type=UUID, default=None, help="Limita la verificación a un predio")
    parser.add_argument(
        "--intervalo",
        type=int,
        default=None,
        help="Segundos entre pasadas (por defecto AGRO_ALERTAS_INTERVALO_SEGUNDOS o 60)",
    )
    parser.add_argument("--una-vez", action="store_true", help="Ejecuta una sola pasada y termina")
    args = parser.parse_args(argv)
    if args.intervalo is not None and args.intervalo <= 0:
        parser.error("--intervalo debe ser mayor a cero")
    return args


async def _ejecutar(
    service: MonitoreoAlertasService,
    firm_id: UUID,
    premise_id: Optional[UUID],
    intervalo: int,
    una_vez: bool,
) -> int:
    while True:
        resultado = await service.verificar_todo(firm_id, premise_id)
        print(
            f"[verificar_alertas] alertas nuevas={resultado.total_alertas} "
            f"por_dominio={resultado.por_dominio} completa={resultado.completa}",
            flush=True,
        )
        if not resultado.completa:
            for error in resultado.errores:
                print(
                    f"[verificar_alertas] error dominio={error.dominio} "
                    f"verificacion={error.verificacion} entidad={error.entidad_id}: {error.error}",
                    flush=True,
                )
        if una_vez:
            return 0 if resultado.completa else 1
        await asyncio.sleep(intervalo)


async def _main_async(args: argparse.Namespace) -> int:
    intervalo = args.intervalo or get_settings().intervalo_segundos
    session_factory = get_session_factory()
    service = crear_monitoreo_service(
        MedicionRepository(session_factory),
        AlertaRepository(session_factory),
    )
    try:
        return await _ejecutar(service, args.firm_id, args.premise_id, intervalo, args.una_vez)
    finally:
        await get_engine().dispose()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    print(
        f"[verificar_alertas] firm={args.firm_id} premise={args.premise_id} "
        f"una_vez={args.una_vez}",
        flush=True,
    )
    try:
        return asyncio.run(_main_async(args))
    except KeyboardInterrupt:
        logger.info("Verificación periódica detenida por el usuario")
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
