"""Pydantic models for factomd JSON-RPC response payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blackbox.models import Entry

ZERO_KEYMR = "0" * 64


def _hex_bytes(value: object) -> bytes:
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        raise ValueError("expected a hex string")
    return bytes.fromhex(value)


class ChainHeadPayload(BaseModel):
    """Result of ``chain-head``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    chainhead: str = Field(default="", description="Key MR of the newest entry block.")
    chaininprocesslist: bool = Field(
        default=False,
        description="True when the chain head is still in the process list.",
    )


class EntryListItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    entryhash: str = Field(..., min_length=64, max_length=64)
    timestamp: int | None = None


class EntryBlockHeader(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    chainid: str
    prevkeymr: str = ZERO_KEYMR
    blocksequencenumber: int | None = None
    dbheight: int | None = None
    timestamp: int | None = None


class EntryBlockPayload(BaseModel):
    """Result of ``entry-block``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    header: EntryBlockHeader
    entrylist: list[EntryListItem] = Field(default_factory=list)


class EntryPayload(BaseModel):
    """Result of ``entry``; hex fields are decoded to bytes."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    chainid: str = Field(..., min_length=64, max_length=64)
    extids: list[bytes] = Field(default_factory=list)
    content: bytes = b""

    @field_validator("extids", mode="before")
    @classmethod
    def _decode_extids(cls, value: object) -> list[bytes]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("extids must be a list")
        return [_hex_bytes(item) for item in value]

    @field_validator("content", mode="before")
    @classmethod
    def _decode_content(cls, value: object) -> bytes:
        if value is None:
            return b""
        return _hex_bytes(value)

    def to_entry(self) -> Entry:
        return Entry(
            chain_id=self.chainid,
            ext_ids=tuple(self.extids),
            content=self.content,
        )


class CommitPayload(BaseModel):
    """Result of ``commit-chain`` and ``commit-entry``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    message: str = ""
    txid: str = Field(..., min_length=1)
    entryhash: str | None = None


class RevealPayload(BaseModel):
    """Result of ``reveal-chain`` and ``reveal-entry``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    message: str = ""
    entryhash: str = Field(..., min_length=1)
    chainid: str | None = None
