from typing import Any, Optional
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(message: str, result: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"status": True, "message": message, "result": result}),
    )


def failure(message: str, status_code: int, error: Optional[Any] = None) -> JSONResponse:
    content: dict = {"status": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
