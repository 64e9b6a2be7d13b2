"""ORM models; importing this package registers every table on ``Base.metadata``."""

from .alertas import AlertaMonitoreo  # noqa: F401
from .entidades import Lote, Predio, VariedadSemilla  # noqa: F401
from .mediciones import (  # noqa: F401
    AnalisisSemillaVariedad,
    AnalisisSueloLote,
    MedicionPasturaLote,
    RegistroLluviaPredio,
)
