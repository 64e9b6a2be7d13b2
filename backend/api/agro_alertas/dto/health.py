from __future__ import annotations

from pydantic import BaseModel, Field

from .. import __version__


class HealthStatusResponse(BaseModel):
    status: str = Field(default="ok")
    servicio: str = Field(default="agro-alertas")
    version: str = Field(default=__version__)
