from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .database import engine, Base
from .logging_config import configure_logging
from . import models  # noqa: F401  (registers tables on Base.metadata)
from .api.user import platforms
from .api.admin import sync_logs

configure_logging(settings.LOG_LEVEL)

# This creates the tables. For production, use Alembic migrations.
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="DSA Progress Tracker",
    description="API for linking competitive-programming platforms and aggregating solved-problem statistics.",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Mount Routers ---

# User Module
user_router_prefix = "/api/v1"
app.include_router(platforms.router, prefix=user_router_prefix, tags=["Platforms"])

# Admin Module
admin_router_prefix = "/api/v1/admin"
app.include_router(sync_logs.router, prefix=admin_router_prefix, tags=["Admin"])

@app.get("/health", tags=["System"])
def health_check():
    return {"status": "ok", "message": "API is running"}
