import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from .api import data_router, realtime_router, auth_router
from .config import get_config
from .db import SQLiteStorage, get_storage, seed_demo_data
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(config.log_level)
    storage = get_storage()
    if config.seed_demo_data:
        seed_demo_data(storage)
    logger.info("DataFlow API ready (db=%s)", storage.db_path)
    yield

app = FastAPI(
    title="DataFlow Analytics API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(data_router, prefix="/api")
app.include_router(realtime_router, prefix="/api")
app.include_router(auth_router, prefix="/api")

@app.get("/")
async def root():
    return {
        "name": "DataFlow Analytics API",
        "version": "1.0.0",
        "docs": "/docs",
    }

@app.get("/health")
def health(storage: SQLiteStorage = Depends(get_storage)):
    return {
        "status": "healthy",
        "storage": storage.get_stats(),
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("dataflow_api.main:app", host="0.0.0.0", port=8000, reload=True)
