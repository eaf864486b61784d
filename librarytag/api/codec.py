"""API routes for the Code 40 identifier codec."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from librarytag.codec import code40
from librarytag.errors import TagError
from librarytag.rfid.hexdump import parse_hex, to_hex

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/code40", tags=["code40"])


class EncodeRequest(BaseModel):
    text: str


class DecodeRequest(BaseModel):
    hex: str  # e.g. "19E3CE36" or "19 E3 CE 36"


@router.post("/encode")
async def encode_text(req: EncodeRequest):
    """Pack text into Code 40 bytes."""
    try:
        data = code40.encode(req.text)
    except TagError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"text": req.text, "hex": to_hex(data)}


@router.post("/decode")
async def decode_hex(req: DecodeRequest):
    """Unpack Code 40 bytes into text."""
    try:
        data = parse_hex(req.hex)
        text = code40.decode(data)
    except TagError as e:
        logger.info("Rejected Code 40 decode: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return {"hex": to_hex(data), "text": text}
