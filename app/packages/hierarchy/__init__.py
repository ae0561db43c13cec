"""组织层级业务包：组织清单、科室开通与基于角色的访问控制。"""

from app.packages.types import AppPackage

from .api.v1 import api_router
from .clients.upstream import close_client, init_client
from .core.config import get_settings
from .core.exceptions import (
    fetch_error_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.logger import logger, setup_logging
from .core.responses import create_response


async def startup() -> None:
    init_client()


async def shutdown() -> None:
    await close_client()


package = AppPackage(
    name="hierarchy",
    api_router=api_router,
    get_settings=get_settings,
    setup_logging=setup_logging,
    logger=logger,
    startup=startup,
    shutdown=shutdown,
    create_response=create_response,
    http_exception_handler=http_exception_handler,
    validation_exception_handler=validation_exception_handler,
    fetch_error_handler=fetch_error_handler,
    generic_exception_handler=generic_exception_handler,
)

__all__ = ["package", "api_router", "get_settings"]
