from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from .config import get_settings
from .db import connect
from .errors import register_exception_handlers
from .middleware.request_logging import RequestLoggingMiddleware
from .routers import pets, favorites, adoption, tags
import logging

settings = get_settings()

# Configurar logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # sin credenciales del datastore el arranque se aborta aquí
    datastore = connect(settings)
    await datastore.ensure_indexes()
    app.state.datastore = datastore
    logger.info("%s backend ready (env=%s)", settings.app_name, settings.env)
    yield
    datastore.close()
    logger.info("Datastore connection closed")

app = FastAPI(title=settings.app_name, lifespan=lifespan)

# CORS abierto: cualquier origen puede llamar a la API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

@app.get("/", response_class=PlainTextResponse)
async def root():
    return "PetMatch Backend is running 🐾"

@app.get("/health")
async def health():
    return {"status": "ok", "env": settings.env}

# Routers
app.include_router(pets.router, prefix="/pets", tags=["pets"])
app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
app.include_router(adoption.router, prefix="/adoption", tags=["adoption"])
app.include_router(tags.router, prefix="/tags", tags=["tags"])
