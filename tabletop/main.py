from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base, SessionLocal
from .routers import catalog, outlines, pricing

logger = logging.getLogger("tabletop")

# Create catalog tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Tabletop Pricing Engine",
    description=f"Parametric tabletop geometry and costing for {settings.COMPANY_NAME}",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(catalog.router, prefix="/api")
app.include_router(outlines.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "tabletop-pricing"}


@app.on_event("startup")
def auto_seed():
    """Seed the default catalog on first run."""
    db = SessionLocal()
    try:
        catalog.seed_catalog(db)
    finally:
        db.close()
