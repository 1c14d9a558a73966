from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv

# load the project-root .env before settings are read
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"
if env_path.exists():
    load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notices.db.session import init_db
from notices.settings import get_settings
from notices.utils.logging import configure_logging

from .routes import router

settings = get_settings()
configure_logging(settings.log_level, json_enabled=settings.log_json)
logging.getLogger(__name__).info("api.startup", extra={"env_file_loaded": env_path.exists()})

app = FastAPI(title="Government Notices API", version="0.1.0")

init_db()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

app.include_router(router)


@app.get("/healthz", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
