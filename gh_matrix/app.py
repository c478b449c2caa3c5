"""the beautiful world start from here."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from gh_matrix.config import settings
from gh_matrix.routers import gh

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="GitHub → Matrix notices", docs_url=None, redoc_url=None, openapi_url=None)

app.include_router(gh.router)
