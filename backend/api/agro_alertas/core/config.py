"""Application configuration management."""
from __future__ import annotations

import os
from functools import lru_cache


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} debe ser un entero, se recibió {raw!r}") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "si", "on"}


class Settings:
    """Container for environment-driven configuration."""

    def __init__(self) -> None:
        self.log_level: str = os.environ.get("AGRO_ALERTAS_LOG_LEVEL", "INFO").upper()
        self.log_json: bool = _env_bool("AGRO_ALERTAS_LOG_JSON", True)
        self.intervalo_segundos: int = _env_int("AGRO_ALERTAS_INTERVALO_SEGUNDOS", 60)
        self.dias_fertilizacion: int = _env_int("AGRO_ALERTAS_DIAS_FERTILIZACION", 30)
        self.dias_medicion_pastura: int = _env_int("AGRO_ALERTAS_DIAS_MEDICION_PASTURA", 14)
        origins = os.environ.get("AGRO_ALERTAS_CORS_ORIGINS", "http://localhost:5173")
        self.cors_origins: list[str] = [o.strip() for o in origins.split(",") if o.strip()]

    @property
    def database_url(self) -> str:
        try:
            return os.environ["DATABASE_URL"]
        except KeyError as exc:
            raise RuntimeError(
                "DATABASE_URL must be defined; configure your environment before starting the app."
            ) from exc


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid repeated environment parsing."""

    return Settings()


__all__: tuple[str, ...] = ("get_settings", "Settings")
