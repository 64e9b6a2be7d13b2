from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from agro_alertas.utils.type_converters import as_bool, as_date, as_float, coerce_uuid


@pytest.mark.parametrize(
    "valor, esperado",
    [
        (85, 85.0),
        ("84.9", 84.9),
        ("84,9", 84.9),
        (Decimal("12.50"), 12.5),
        (0, 0.0),
        ("0", 0.0),
    ],
)
def test_as_float_acepta_numeros_y_strings(valor, esperado):
    assert as_float(valor) == esperado


@pytest.mark.parametrize("valor", [None, "", "   ", "abc", True, float("nan"), float("inf"), [1]])
def test_as_float_devuelve_none_para_valores_invalidos(valor):
    assert as_float(valor) is None



@pytest.mark.parametrize(
    "valor, esperado",
    [
        (True, True),
        ("true", True),
        (" Si ", True),
        ("1", True),
        (1, True),
        (False, False),
        ("false", False),
        ("0", False),
        ("no", False),
        ("", False),
        (0, False),
        (None, False),
    ],
)
def test_as_bool_interpreta_banderas_de_texto(valor, esperado):
    assert as_bool(valor) is esperado

def test_as_date_normaliza_datetime_y_strings():
    assert as_date(datetime(2025, 3, 1, 10, 30)) == date(2025, 3, 1)
    assert as_date("2025-03-01") == date(2025, 3, 1)
    assert as_date(date(2025, 3, 1)) == date(2025, 3, 1)
    assert as_date("") is None
    assert as_date("no-es-fecha") is None


def test_coerce_uuid_valida_formato():
    valor = uuid4()
    assert coerce_uuid(str(valor)) == valor
    assert coerce_uuid(valor) is valor
    with pytest.raises(ValueError, match="lot_id debe ser un UUID válido"):
        coerce_uuid("lote-001", field="lot_id")
