"""
Result shapes returned by screen flows.

Flows never render; they return a dict the UI (or the HTTP API) turns into a
toast and, optionally, a navigation:

    {"ok": True, "toast": {...}, "redirect": "/dashboard", "data": {...}}
"""

from typing import Any, Dict, Optional

DEFAULT = "default"
DESTRUCTIVE = "destructive"


def toast(title: str, description: str, variant: str = DEFAULT) -> Dict[str, str]:
    return {"title": title, "description": description, "variant": variant}


def success(title: str, description: str, *, redirect: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {"ok": True, "toast": toast(title, description)}
    if redirect:
        result["redirect"] = redirect
    if data is not None:
        result["data"] = data
    return result


def failure(description: str, title: str = "Error", *, field_errors: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {"ok": False, "toast": toast(title, description, DESTRUCTIVE)}
    if field_errors:
        result["field_errors"] = field_errors
    return result
