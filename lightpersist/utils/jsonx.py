"""
JSON helpers for request bodies and cached payloads
"""
import json
from typing import Any

from ..errors import InvalidPayloadError

def dumps_payload(value: Any) -> str:
    """Serialize a cached value, refusing anything JSON cannot carry"""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise InvalidPayloadError(f"value is not JSON serializable: {e}") from e

def loads_payload(text: str) -> Any:
    """Parse a cached payload; corrupt data is an error, not a miss"""
    try:
        return json.loads(text)
    except ValueError as e:
        raise InvalidPayloadError(f"cached payload is not valid JSON: {e}") from e

def truthy_str(v: Any) -> bool:
    """Convert various values to boolean"""
    if isinstance(v, bool):
        return v
    if v is None:
        return None
    s = str(v).strip().lower()
    if s in {"y", "yes", "true", "1"}:
        return True
    if s in {"n", "no", "false", "0"}:
        return False
    return None
