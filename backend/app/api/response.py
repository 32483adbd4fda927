from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ok(data: Any = None, message: Optional[str] = None, status_code: int = 200) -> JSONResponse:
    """
    Standard success wrapper:
    {
      "success": true,
      "message": "..." (optional),
      "data": ... (optional)
    }
    """
    payload: Dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    # jsonable_encoder dumps pydantic models in JSON mode by alias (camelCase)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def err(
    message: str = "Something went wrong",
    status_code: int = 400,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Standard error wrapper: {"success": false, "message": "..."}"""
    return JSONResponse(status_code=status_code, content={"success": False, "message": message}, headers=headers)
