"""JSON compaction for embedded assets."""

from __future__ import annotations

import json

from pyessence.vfs.errors import CompactError


def _reject_constant(token: str) -> None:
    # json.loads accepts NaN and Infinity, which are not JSON
    raise CompactError(f"reencode json: invalid token {token!r}")


def compact_json(data: bytes) -> bytes:
    """
    Strip insignificant whitespace from a JSON document.

    Key order and string contents are preserved, so decoding the result
    gives a value equal to decoding the input. Only strict JSON is
    accepted, and numbers that overflow a float are rejected rather than
    re-encoded as Infinity.

    Raises:
        CompactError: If data is not valid JSON or cannot be re-encoded as JSON
    """
    try:
        value = json.loads(data, parse_constant=_reject_constant)
    except CompactError:
        raise
    except (ValueError, UnicodeDecodeError) as e:
        raise CompactError(f"reencode json: {e}") from e

    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except ValueError as e:
        raise CompactError(f"reencode json: {e}") from e

    return text.encode("utf-8")
