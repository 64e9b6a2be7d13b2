"""Descriptores de reglas de umbral y registro inmutable por dominio."""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Optional

from ...dto.alertas import Prioridad


@dataclass(frozen=True)
class MensajeAlerta:
    titulo: str
    descripcion: str
    recomendacion: str


@dataclass(frozen=True)
class ReglaUmbral:
    """Regla de umbral de un dominio de monitoreo.

    ``validar`` nunca lanza: ante datos ausentes devuelve ``False``.
    ``generar_mensaje`` solo se invoca cuando ``validar`` fue verdadero.
    """

    id: str
    nombre: str
    descripcion: str
    prioridad: Prioridad
    tipo: str
    validar: Callable[..., bool]
    generar_mensaje: Callable[..., MensajeAlerta]
    umbrales: Mapping[str, Any] = field(default_factory=dict)
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "umbrales", MappingProxyType(dict(self.umbrales)))


class RegistroReglas(Mapping[str, ReglaUmbral]):
    """Mapping inmutable ``id -> ReglaUmbral`` con identificadores únicos."""

    def __init__(self, dominio: str, reglas: Iterable[ReglaUmbral]) -> None:
        contenido: dict[str, ReglaUmbral] = {}
        for regla in reglas:
            if regla.id in contenido:
                raise ValueError(f"Regla duplicada en dominio {dominio}: {regla.id}")
            contenido[regla.id] = regla
        self._dominio = dominio
        self._reglas = MappingProxyType(contenido)

    @property
    def dominio(self) -> str:
        return self._dominio

    def __getitem__(self, regla_id: str) -> ReglaUmbral:
        return self._reglas[regla_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._reglas)

    def __len__(self) -> int:
        return len(self._reglas)

    def __repr__(self) -> str:
        return f"RegistroReglas(dominio={self._dominio!r}, reglas={list(self._reglas)!r})"

    def habilitadas(self) -> list[ReglaUmbral]:
        return [regla for regla in self._reglas.values() if regla.enabled]

    def con_cambios(self, regla_id: str, **cambios: Any) -> "RegistroReglas":
        """Devuelve un registro nuevo con una regla reemplazada.

        Útil para deshabilitar reglas puntuales sin tocar el registro original.
        """
        if regla_id not in self._reglas:
            raise KeyError(regla_id)
        reglas = [
            replace(regla, **cambios) if regla.id == regla_id else regla
            for regla in self._reglas.values()
        ]
        return RegistroReglas(self._dominio, reglas)


def formatear_numero(valor: Optional[float]) -> str:
    """Representa un número sin ceros decimales superfluos (80 -> '80', 84.9 -> '84.9')."""
    if valor is None:
        return "N/A"
    if float(valor).is_integer():
        return str(int(valor))
    return f"{valor:g}"


def porcentaje_del_objetivo(resultado: Optional[float], objetivo: Optional[float]) -> Optional[float]:
    """Proporción resultado/objetivo en porcentaje; None si el objetivo es inválido."""
    if resultado is None or objetivo is None or objetivo == 0:
        return None
    return resultado / objetivo * 100
