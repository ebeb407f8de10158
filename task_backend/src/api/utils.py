from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


# PUBLIC_INTERFACE
def error_body(message: str, detail: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """
    Build the standard error body for non-2xx responses.

    Args:
        message: Client-safe, human-readable message.
        detail: Optional list of per-field validation problems.

    Returns:
        Dict with key 'error', plus 'detail' when given.
    """
    body: Dict[str, Any] = {"error": message}
    if detail is not None:
        body["detail"] = detail
    return body


# PUBLIC_INTERFACE
def summarize_validation_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Reduce pydantic/FastAPI error dicts to JSON-safe loc/msg/type entries.

    The raw errors may carry the offending input and exception objects in
    'ctx'; neither is echoed back to the client.
    """
    return [
        {
            "loc": [str(p) if not isinstance(p, int) else p for p in e.get("loc", ())],
            "msg": str(e.get("msg", "")),
            "type": str(e.get("type", "")),
        }
        for e in errors
    ]
