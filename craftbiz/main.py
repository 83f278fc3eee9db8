from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .database import engine, Base
from .dependencies import close_stores, get_stores
from .routers import recipes, quotes, orders, replies, app_settings

logger = logging.getLogger("craftbiz")

# Create tables (kv_records is the only one)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="CraftBiz",
    description="Pricing calculator, order tracker and quick replies for handmade goods",
    version="2.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(recipes.router, prefix="/api")
app.include_router(quotes.router, prefix="/api")
app.include_router(orders.router, prefix="/api")
app.include_router(replies.router, prefix="/api")
app.include_router(app_settings.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "craftbiz"}


@app.on_event("startup")
def load_collections():
    """Read recipes, orders and replies from storage (defaults when absent)."""
    get_stores().load()
    logger.info("Collections loaded")


@app.on_event("shutdown")
def flush_collections():
    """Let queued write-backs finish before the process exits."""
    close_stores()
