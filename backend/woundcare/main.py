"""
WoundCare - clinical records API for chronic wound treatment.
Patients, wound assessments, treatments and photo documentation.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .core.config import settings
from .core.errors import register_exception_handlers
from .core.security import SessionGateMiddleware
from .models.base import Base, engine
from .api import auth, patients, wounds, treatments, images, reports, users
from .seed_demo import seed_demo_data

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # NOTE: In production, use Alembic migrations instead of create_all()
    Base.metadata.create_all(bind=engine)
    if settings.SEED_DEMO_DATA:
        seed_demo_data()
    logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
    yield


app = FastAPI(
    title="WoundCare Clinical Records API",
    description=(
        "Clinical records for chronic wound care: patient registry, wound "
        "assessments, dressing-change protocols and photo documentation, "
        "gated by role-based permissions."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Added last so it runs outermost and 401s still carry CORS headers
app.add_middleware(SessionGateMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(patients.router, prefix="/api")
app.include_router(wounds.router, prefix="/api")
app.include_router(treatments.router, prefix="/api")
app.include_router(images.router, prefix="/api")
app.include_router(reports.router, prefix="/api")

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
