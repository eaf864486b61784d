"""API routes for tag layout, byte edits and password derivation."""

import logging
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, StrictBool, StrictInt, StrictStr

from librarytag import config
from librarytag.crypto.passwords import derive_passwords_async
from librarytag.errors import TagError, UnknownFormat
from librarytag.rfid.formats import FORMATS, TagFormat, get_format
from librarytag.rfid.hexdump import parse_hex
from librarytag.rfid.tag import Tag

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["tags"])


# ──────────────────────────────────────────────
# Request/Response models
# ──────────────────────────────────────────────

class DescribeRequest(BaseModel):
    format: str = config.DEFAULT_FORMAT
    data_hex: Optional[str] = None  # Defaults to the format's example data


class SetByteRequest(BaseModel):
    format: str = config.DEFAULT_FORMAT
    data_hex: str
    index: int
    # 0-255 or 1-2 hex digits; bools are kept uncoerced so the edit rejects them
    value: Union[StrictInt, StrictStr, StrictBool]


class PasswordsRequest(BaseModel):
    format: str = config.DEFAULT_FORMAT
    data_hex: str
    kill_key: Optional[str] = None
    access_key: Optional[str] = None


def _lookup_format(key: str) -> TagFormat:
    try:
        return get_format(key)
    except UnknownFormat as e:
        raise HTTPException(status_code=404, detail=str(e))


def _load_tag(fmt: TagFormat, data_hex: Optional[str]) -> Tag:
    try:
        data = parse_hex(data_hex) if data_hex is not None else None
        return Tag.from_format(fmt, data)
    except TagError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ──────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────

@router.get("/formats")
async def list_formats():
    """List the known tag formats with their block layout."""
    return [fmt.to_dict() for fmt in FORMATS.values()]


@router.post("/tags/describe")
async def describe_tag(req: DescribeRequest):
    """Lay out a data block and decode its sub-fields."""
    fmt = _lookup_format(req.format)
    return _load_tag(fmt, req.data_hex).to_dict()


@router.post("/tags/set-byte")
async def set_tag_byte(req: SetByteRequest):
    """Apply a single data byte edit and return the updated tag."""
    fmt = _lookup_format(req.format)
    tag = _load_tag(fmt, req.data_hex)
    try:
        if isinstance(req.value, str):
            tag.set_data_byte_hex(req.index, req.value)
        else:
            tag.set_data_byte(req.index, req.value)
    except TagError as e:
        logger.info("Rejected edit of byte %d: %s", req.index, e)
        raise HTTPException(status_code=400, detail=str(e))
    return tag.to_dict()


@router.post("/tags/passwords")
async def tag_passwords(req: PasswordsRequest):
    """Derive kill and access passwords for a data block."""
    fmt = _lookup_format(req.format)
    tag = _load_tag(fmt, req.data_hex)
    credential = await derive_passwords_async(
        tag.data, req.kill_key, req.access_key, fmt.password_bytes,
    )
    return credential.to_dict()
