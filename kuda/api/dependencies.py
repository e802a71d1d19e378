import logging
from typing import Any, Dict, Optional

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)


async def bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    """Extract the caller's backend auth token from `Authorization: Bearer <token>`."""
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_state_manager(request: Request):
    return request.app.state.state_manager


def get_config(request: Request):
    return request.app.state.config


def flow_response(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a successful flow result as-is, or raise the matching HTTP error:

    - client-side validation (`field_errors`) -> 422
    - upstream rejected the caller's token or credentials -> 401
    - any other upstream or unexpected failure -> 502
    - remaining business-rule rejections -> 400
    """
    if result.get("ok"):
        return result

    toast = result.get("toast", {})
    if "field_errors" in result:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "validation_error",
                "message": toast.get("description"),
                "field_errors": result["field_errors"],
                "toast": toast,
            },
        )

    metadata = result.get("metadata")
    if metadata is not None:
        if metadata.get("status_code") in (401, 403):
            code, error = status.HTTP_401_UNAUTHORIZED, "unauthorized"
        else:
            code, error = status.HTTP_502_BAD_GATEWAY, "integration_error"
        raise HTTPException(
            status_code=code,
            detail={"error": error, "message": toast.get("description"), "toast": toast},
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": "rejected", "message": toast.get("description"), "toast": toast},
    )
