from __future__ import annotations

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .app_logging import configure_logging
from .api.errors import domain_exception_handler
from .api.v1.routers import ai, authors, dashboard, pdf, records, tags, users
from .domain.exceptions import DomainException

load_dotenv()
configure_logging()

app = FastAPI(title="Magazine Archive Backend", version="0.1.0")

app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)
app.add_exception_handler(DomainException, domain_exception_handler)

api_router = APIRouter(prefix="/api")
api_router.include_router(records.router)
api_router.include_router(tags.router)
api_router.include_router(authors.router)
api_router.include_router(users.router)
api_router.include_router(dashboard.router)
api_router.include_router(ai.router)
api_router.include_router(pdf.router)

app.include_router(api_router)
