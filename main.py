# main.py
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config.logging_config import configure_logging
from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.import_routes import router as import_router
from routers.name_mapping_routes import router as name_mapping_router
from routers.positions_routes import router as positions_router
from routers.research_routes import router as research_router
from routers.settings_routes import router as settings_router
from routers.summary_routes import router as summary_router
from routers.taxonomy_routes import router as taxonomy_router
from routers.trades_routes import router as trades_router

configure_logging()

app = FastAPI(title="Portfolio Exposure Backend")

origins = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(summary_router, prefix="/api")
app.include_router(import_router, prefix="/api")
app.include_router(positions_router, prefix="/api/positions")
app.include_router(research_router, prefix="/api/research")
app.include_router(taxonomy_router, prefix="/api/taxonomy")
app.include_router(name_mapping_router, prefix="/api/name-mappings")
app.include_router(settings_router, prefix="/api/settings")
app.include_router(trades_router, prefix="/api/trades")

# db startup
from database import Base, engine
import models  # this triggers models/__init__.py which imports all tables

Base.metadata.create_all(bind=engine)
