"""NDJSON encoder for recorded report requests."""

import json
from collections.abc import Iterable

from featurelink.core.models import FinishItemRequest, ItemLog, StartItemRequest


def _start_object(request: StartItemRequest) -> dict[str, object]:
    return {
        "name": request.name,
        "type": request.type.value,
        "start_time": request.start_time,
        "description": request.description,
        "code_ref": request.code_ref,
        "attributes": sorted(
            ({"key": a.key, "value": a.value} for a in request.attributes),
            key=lambda a: (a["key"] or "", a["value"]),
        ),
        "parameters": [{"key": p.key, "value": p.value} for p in request.parameters],
        "test_case_id": request.test_case_id,
        "has_stats": request.has_stats,
    }


def encode_request(item_id: str | None, payload: object) -> dict[str, object]:
    """Build the JSON object of one start, finish or log payload."""
    if isinstance(payload, StartItemRequest):
        return {"event": "start", "item_id": item_id, **_start_object(payload)}
    if isinstance(payload, FinishItemRequest):
        return {
            "event": "finish",
            "item_id": item_id,
            "end_time": payload.end_time,
            "status": payload.status.value if payload.status else None,
        }
    if isinstance(payload, ItemLog):
        return {
            "event": "log",
            "item_id": payload.item_id,
            "timestamp": payload.timestamp,
            "level": payload.level,
            "message": payload.message,
            "attributes": payload.attributes,
        }
    raise TypeError(f"Cannot encode {type(payload).__name__}")


def encode_requests(records: Iterable[tuple[str | None, object]]) -> str:
    """Encode (item_id, payload) records to newline-delimited JSON.

    Args:
        records: Pairs of item identifier and request payload.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no records.
    """
    lines = [json.dumps(encode_request(item_id, payload)) for item_id, payload in records]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
