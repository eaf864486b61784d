"""
librarytag — Library RFID tag layout and credential service.

FastAPI backend providing APIs for:
- Code 40 packing and unpacking of library identifiers
- Tag memory layout of the supported EPC formats
- Validated single-byte edits of the EPC data block
- Kill/access password derivation (SHA-512) and the RES field
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from librarytag import config
from librarytag.api import codec, tags
from librarytag.rfid.formats import FORMATS

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting librarytag with formats: %s", ", ".join(FORMATS))
    yield
    logger.info("Shutting down librarytag")


app = FastAPI(
    title="librarytag",
    description="Library RFID tag layout and credential derivation",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routers
app.include_router(codec.router)
app.include_router(tags.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
