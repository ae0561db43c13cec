"""异常处理模块：定义统一的业务异常、上游异常与响应格式。"""

from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.packages.hierarchy.core.logger import logger


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    def __init__(self, msg: str, code: int = status.HTTP_400_BAD_REQUEST, data=None) -> None:
        super().__init__(status_code=code, detail=msg)
        self.data = data


class UpstreamError(Exception):
    """上游医院接口返回了非 2xx 响应。

    ``detail`` 保留响应体中的 ``detail`` 字段原样（字符串、数组、对象或 ``None``），
    由调用方按场景解释。
    """

    def __init__(self, status_code: int, detail: Any = None, message: Optional[str] = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(message or f"Upstream request failed with status code {status_code}")


class UpstreamTransportError(Exception):
    """请求未得到任何响应（连接失败、DNS、协议错误等）。"""


class FetchError(Exception):
    """组织清单不可用；调用方应渲染错误状态，而不是空列表。"""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 FastAPI 的 ``HTTPException`` 转换为统一响应格式。"""
    payload = {"msg": exc.detail, "data": getattr(exc, "data", None), "code": exc.status_code}
    return JSONResponse(status_code=exc.status_code, content=payload)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # pragma: no cover - framework glue
    """统一处理请求体验证失败的场景。"""

    def _serialize(obj: Any) -> Any:
        if isinstance(obj, Exception):
            return str(obj)
        if isinstance(obj, dict):
            return {key: _serialize(value) for key, value in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [_serialize(item) for item in obj]
        return obj

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "msg": "Request validation failed",
            "data": _serialize(exc.errors()),
            "code": status.HTTP_422_UNPROCESSABLE_ENTITY,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：将未捕获异常转换为标准的 500 响应结构。"""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    payload = {
        "msg": "Internal server error",
        "data": None,
        "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)


async def fetch_error_handler(request: Request, exc: FetchError) -> JSONResponse:  # pragma: no cover - framework glue
    """组织清单不可用时返回 502，与“清单为空”明确区分。"""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"msg": str(exc), "data": None, "code": status.HTTP_502_BAD_GATEWAY},
    )
