from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging

from .config import settings
from .database import engine, Base
from .routers import services, estimate

logger = logging.getLogger("plumbing_estimator")

# Services table only; quotes are never persisted
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Plumbing Services & Cost Estimator",
    description="Service catalog and quote calculator for plumbing jobs",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(services.router)
app.include_router(estimate.router)


@app.get("/health")
def health():
    return {"status": "ok", "app": "plumbing-estimator"}


@app.get("/test")
def test_connection():
    """Health check linked from the web client. Also pings the database."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.warning(f"Database check failed: {e}")
        database = "unavailable"
    return {"backend": "running", "database": database}


@app.on_event("startup")
def auto_seed():
    """Auto-seed the default service catalog on first run."""
    if not settings.SEED_ON_STARTUP:
        return
    from .database import SessionLocal
    from .catalog import seed_default_services
    db = SessionLocal()
    try:
        seed_default_services(db)
    finally:
        db.close()
