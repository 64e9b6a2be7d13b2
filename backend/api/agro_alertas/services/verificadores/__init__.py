"""Verificadores por dominio: reglas individuales y agregados por entidad."""

from .base import ResultadoVerificacion, VerificadorBase  # noqa: F401
from .lluvia import VerificadorLluvia  # noqa: F401
from .pasturas import VerificadorPasturas  # noqa: F401
from .semillas import EtapaSemilla, VerificadorSemillas  # noqa: F401
from .suelo import VerificadorSuelo  # noqa: F401
