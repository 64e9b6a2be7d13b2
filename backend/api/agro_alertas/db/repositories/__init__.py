from .alerta_repository import AlertaRepository  # noqa: F401
from .medicion_repository import MedicionRepository  # noqa: F401
