"""应用入口：负责创建 FastAPI 实例并绑定生命周期事件。"""

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.middleware.request_id import RequestIdMiddleware
from app.packages import get_active_package
from app.packages.hierarchy.core.exceptions import FetchError

package = get_active_package()
package.setup_logging()
settings = package.get_settings()
logger = package.logger
api_router = package.api_router
create_response = package.create_response

app = FastAPI(title=settings.project_name, debug=settings.debug)

# 会话依赖 Cookie，允许的来源由 CORS_ORIGINS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestIdMiddleware)


@app.on_event("startup")
async def startup_event() -> None:
    """初始化上游客户端，确认服务可用后输出成功日志。"""
    await package.startup()
    logger.info("SUCCESS - Application running at http://127.0.0.1:%s", settings.app_port)


@app.on_event("shutdown")
async def shutdown_event() -> None:
    await package.shutdown()


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request, exc):  # pragma: no cover - framework glue
    """将 ``HTTPException`` 转换为统一的响应结构。"""
    return await package.http_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def custom_validation_exception_handler(request, exc):  # pragma: no cover - framework glue
    return await package.validation_exception_handler(request, exc)


@app.exception_handler(FetchError)
async def custom_fetch_error_handler(request, exc):  # pragma: no cover - framework glue
    """组织清单不可用：错误状态，而非空列表。"""
    return await package.fetch_error_handler(request, exc)


@app.exception_handler(Exception)
async def custom_generic_exception_handler(request, exc):  # pragma: no cover - framework glue
    """捕获未预料异常并包装为标准错误响应。"""
    return await package.generic_exception_handler(request, exc)


@app.get("/health")
async def health_check() -> dict:
    """提供健康检查接口，便于编排器与监控系统探活。"""
    return create_response("OK", {"status": "healthy"})


app.include_router(api_router, prefix=settings.api_v1_str)
