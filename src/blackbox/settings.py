"""Environment-backed settings primitives for :mod:`blackbox`."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["BlackboxSettings", "get_settings"]

DEFAULT_FACTOMD_URL = "http://courtesy-node.factom.com/v2"
DEFAULT_LEDGER_TIMEOUT = 8.0
DEFAULT_SAMPLES_PER_SEGMENT = 60
DEFAULT_SAMPLE_INTERVAL = 1.0


class BlackboxSettings(BaseSettings):
    """Expose environment-derived configuration knobs.

    All environment lookups go through this class. Ledger endpoints are read
    here once and handed to clients explicitly; nothing keeps a module-level
    endpoint.

    Attributes:
        factomd_url: JSON-RPC endpoint of the factomd node.
        ledger_timeout: Per-request timeout in seconds for ledger calls.
        secret_key: Hex encoded Ed25519 seed used by the command line.
        segment_dir: Directory where telemetry segments are written.
        samples_per_segment: Samples collected before a segment is closed.
        sample_interval: Seconds between telemetry samples.
        receipt_journal: Optional NDJSON path where anchor receipts are kept.
    """

    factomd_url: str = Field(default=DEFAULT_FACTOMD_URL, alias="BLACKBOX_FACTOMD_URL")
    ledger_timeout: float = Field(
        default=DEFAULT_LEDGER_TIMEOUT, alias="BLACKBOX_LEDGER_TIMEOUT"
    )
    secret_key: str | None = Field(default=None, alias="BLACKBOX_SECRET_KEY")
    segment_dir: str | None = Field(default=None, alias="BLACKBOX_SEGMENT_DIR")
    samples_per_segment: int = Field(
        default=DEFAULT_SAMPLES_PER_SEGMENT, alias="BLACKBOX_SAMPLES_PER_SEGMENT"
    )
    sample_interval: float = Field(
        default=DEFAULT_SAMPLE_INTERVAL, alias="BLACKBOX_SAMPLE_INTERVAL"
    )
    receipt_journal: str | None = Field(default=None, alias="BLACKBOX_RECEIPT_JOURNAL")

    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    @field_validator("ledger_timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> float:
        """Parse the ledger timeout, falling back to the default when malformed."""

        parsed = _positive_float(value)
        return parsed if parsed is not None else DEFAULT_LEDGER_TIMEOUT

    @field_validator("sample_interval", mode="before")
    @classmethod
    def _parse_interval(cls, value: object) -> float:
        """Parse the sample interval; zero disables the pause between samples."""

        parsed = _non_negative_float(value)
        return parsed if parsed is not None else DEFAULT_SAMPLE_INTERVAL

    @field_validator("samples_per_segment", mode="before")
    @classmethod
    def _parse_samples(cls, value: object) -> int:
        """Parse the sample count while tolerating malformed input."""

        if isinstance(value, int) and value > 0:
            return value
        if isinstance(value, str):
            try:
                parsed = int(value.strip())
            except ValueError:
                return DEFAULT_SAMPLES_PER_SEGMENT
            if parsed > 0:
                return parsed
        return DEFAULT_SAMPLES_PER_SEGMENT


def _positive_float(value: object) -> float | None:
    result = _non_negative_float(value)
    return result if result else None


def _non_negative_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return result if result >= 0 else None


def get_settings() -> BlackboxSettings:
    """Return a :class:`BlackboxSettings` instance parsed from the environment."""

    return BlackboxSettings()
