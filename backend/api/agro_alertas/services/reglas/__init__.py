"""Catálogos de reglas de umbral por dominio."""

from .base import MensajeAlerta, RegistroReglas, ReglaUmbral  # noqa: F401
from .lluvia import REGLAS_LLUVIA, crear_reglas_lluvia  # noqa: F401
from .pasturas import REGLAS_PASTURAS, crear_reglas_pasturas  # noqa: F401
from .semillas import REGLAS_SEMILLAS, crear_reglas_semillas  # noqa: F401
from .suelo import REGLAS_SUELO, crear_reglas_suelo  # noqa: F401
