import asyncio
from uuid import uuid4

import pytest

from agro_alertas.dto.alertas import ErrorVerificacion, ResultadoVerificacionGeneral
from agro_alertas.scripts.verificar_alertas import _ejecutar, _parse_args


class _FakeService:
    def __init__(self, resultado: ResultadoVerificacionGeneral):
        self.resultado = resultado
        self.llamadas = []

    async def verificar_todo(self, firm_id, premise_id=None):
        self.llamadas.append((firm_id, premise_id))
        return self.resultado


def test_parse_args():
    firm_id = uuid4()

    args = _parse_args(["--firm-id", str(firm_id), "--intervalo", "30", "--una-vez"])

    assert args.firm_id == firm_id
    assert args.premise_id is None
    assert args.intervalo == 30
    assert args.una_vez is True


def test_parse_args_rechaza_intervalo_no_positivo():
    with pytest.raises(SystemExit):
        _parse_args(["--firm-id", str(uuid4()), "--intervalo", "0"])


def test_una_pasada_completa(capsys):
    service = _FakeService(
        ResultadoVerificacionGeneral(total_alertas=2, por_dominio={"lluvia": 2})
    )
    firm_id = uuid4()

    codigo = asyncio.run(_ejecutar(service, firm_id, None, 60, True))

    assert codigo == 0
    assert service.llamadas == [(firm_id, None)]
    assert "alertas nuevas=2" in capsys.readouterr().out


def test_una_pasada_incompleta_informa_errores(capsys):
    service = _FakeService(
        ResultadoVerificacionGeneral(
            total_alertas=0,
            completa=False,
            mensaje="verificación incompleta",
            errores=[
                ErrorVerificacion(dominio="suelo", verificacion="ph_critico", error="timeout")
            ],
        )
    )

    codigo = asyncio.run(_ejecutar(service, uuid4(), uuid4(), 60, True))

    assert codigo == 1
    salida = capsys.readouterr().out
    assert "error dominio=suelo verificacion=ph_critico" in salida
