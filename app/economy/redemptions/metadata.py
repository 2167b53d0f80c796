from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from app.economy.redemptions.constants import VOID_METADATA_KEYS
from app.economy.redemptions.types import RedemptionMetadata


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_metadata(raw: Mapping[str, object] | None) -> RedemptionMetadata:
    raw = raw or {}
    voided_by = raw.get("voided_by")
    void_reason = raw.get("void_reason")
    return RedemptionMetadata(
        voided_at=_parse_datetime(raw.get("voided_at")),
        voided_by=str(voided_by) if voided_by is not None else None,
        void_reason=str(void_reason) if void_reason is not None else None,
        extra={key: value for key, value in raw.items() if key not in VOID_METADATA_KEYS},
    )


def with_void(
    metadata: RedemptionMetadata,
    *,
    voided_at: datetime,
    voided_by: str,
    void_reason: str,
) -> RedemptionMetadata:
    return RedemptionMetadata(
        voided_at=voided_at,
        voided_by=voided_by,
        void_reason=void_reason,
        extra=dict(metadata.extra),
    )


def dump_metadata(metadata: RedemptionMetadata) -> dict[str, object]:
    payload: dict[str, object] = dict(metadata.extra)
    if metadata.voided_at is not None:
        payload["voided_at"] = metadata.voided_at.isoformat()
    if metadata.voided_by is not None:
        payload["voided_by"] = metadata.voided_by
    if metadata.void_reason is not None:
        payload["void_reason"] = metadata.void_reason
    return payload


def merge_void_metadata(
    raw: Mapping[str, object] | None,
    *,
    voided_at: datetime,
    voided_by: str,
    void_reason: str,
) -> dict[str, object]:
    """Returns the existing metadata with void audit fields layered on top."""
    return dump_metadata(
        with_void(
            parse_metadata(raw),
            voided_at=voided_at,
            voided_by=voided_by,
            void_reason=void_reason,
        )
    )
