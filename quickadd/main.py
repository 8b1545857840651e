import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings, setup_logging
from .nlp.parser import get_parser
from .routers import health, parse, quick_add

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # compile the pattern table before the first request
    get_parser()
    logger.info("Quick add ready (timezone %s, vikunja %s)", settings.quickadd_timezone, settings.vikunja_url or "-")
    yield


app = FastAPI(title="Quick Add Magic", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(parse.router, prefix="/parse", tags=["parse"])
app.include_router(quick_add.router, prefix="/quick-add", tags=["quick-add"])


@app.get("/")
def root():
    return {"ok": True, "service": "quickadd", "version": "0.1.0"}
