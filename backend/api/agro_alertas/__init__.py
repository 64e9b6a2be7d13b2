"""Motor de alertas de monitoreo agropecuario."""

__version__ = "0.1.0"
