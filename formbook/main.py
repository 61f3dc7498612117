import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from . import config
from .api.endpoints import bookings, events, forms, responses, uploads
from .database import create_db_and_tables, engine

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create the upload directory at import time, StaticFiles needs it before app.mount
Path(config.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")
    await create_db_and_tables()
    yield
    logger.info("Application shutting down...")
    await engine.dispose()


app = FastAPI(title="Formbook Backend", lifespan=lifespan)

logger.info("CORS allowed origins: %s", config.ALLOWED_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount(config.UPLOADS_ROUTE, StaticFiles(directory=config.UPLOAD_DIR), name="uploads")

app.include_router(forms.router)
app.include_router(responses.router)
app.include_router(events.router)
app.include_router(bookings.router)
app.include_router(uploads.router)


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Formbook backend!"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "formbook.main:app",
        host=config.APP_HOST,
        port=config.APP_PORT,
        reload=config.RELOAD_APP,
    )
