from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .controllers.alertas_controller import router as alertas_router
from .controllers.health_controller import router as health_router
from .core.config import get_settings


app = FastAPI(
    title="Agro Alertas API",
    version=__version__,
    description="Motor de alertas de monitoreo agropecuario",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(alertas_router)
