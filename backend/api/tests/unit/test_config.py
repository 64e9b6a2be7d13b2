import pytest

from agro_alertas.core.config import Settings
from agro_alertas.dependencies import crear_monitoreo_service


def test_valores_por_defecto(monkeypatch):
    for nombre in (
        "AGRO_ALERTAS_INTERVALO_SEGUNDOS",
        "AGRO_ALERTAS_DIAS_FERTILIZACION",
        "AGRO_ALERTAS_DIAS_MEDICION_PASTURA",
        "AGRO_ALERTAS_CORS_ORIGINS",
    ):
        monkeypatch.delenv(nombre, raising=False)

    settings = Settings()

    assert settings.intervalo_segundos == 60
    assert settings.dias_fertilizacion == 30
    assert settings.dias_medicion_pastura == 14
    assert settings.cors_origins == ["http://localhost:5173"]


def test_lee_variables_de_entorno(monkeypatch):
    monkeypatch.setenv("AGRO_ALERTAS_DIAS_FERTILIZACION", "45")
    monkeypatch.setenv("AGRO_ALERTAS_CORS_ORIGINS", "http://a.local, http://b.local")
    monkeypatch.setenv("AGRO_ALERTAS_LOG_JSON", "false")

    settings = Settings()

    assert settings.dias_fertilizacion == 45
    assert settings.cors_origins == ["http://a.local", "http://b.local"]
    assert settings.log_json is False


def test_entero_invalido(monkeypatch):
    monkeypatch.setenv("AGRO_ALERTAS_INTERVALO_SEGUNDOS", "un minuto")

    with pytest.raises(RuntimeError, match="AGRO_ALERTAS_INTERVALO_SEGUNDOS"):
        Settings()


def test_database_url_requerida(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        Settings().database_url


def test_servicio_aplica_plazos_configurados(monkeypatch, mediciones, alertas):
    monkeypatch.setenv("AGRO_ALERTAS_DIAS_FERTILIZACION", "10")
    monkeypatch.setenv("AGRO_ALERTAS_DIAS_MEDICION_PASTURA", "7")

    service = crear_monitoreo_service(mediciones, alertas, Settings())

    assert service.suelo.reglas["fertilizacion_pendiente"].umbrales["dias"] == 10
    assert service.pasturas.reglas["medicion_vencida"].umbrales["dias"] == 7
