"""上游医院接口客户端：进程内共享一个 ``httpx.AsyncClient``，按请求转发会话凭据。"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from app.packages.hierarchy.core.config import get_settings
from app.packages.hierarchy.core.exceptions import UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.logger import get_request_id, logger

# 浏览器会话依赖 Cookie；部分部署改用 Bearer，两者都原样透传
FORWARDED_HEADERS = ("cookie", "authorization")

_client: Optional[httpx.AsyncClient] = None


def init_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """创建共享客户端；已存在时直接返回，便于测试预先注入 transport。"""
    global _client
    if _client is not None:
        return _client
    settings = get_settings()
    _client = httpx.AsyncClient(
        base_url=settings.upstream_base_url,
        timeout=settings.upstream_timeout_seconds,
        headers={"Content-Type": "application/json"},
        transport=transport,
    )
    logger.info("Upstream client initialized for %s", settings.upstream_base_url)
    return _client


async def close_client() -> None:
    global _client
    if _client is None:
        return
    client, _client = _client, None
    await client.aclose()


def get_http_client() -> httpx.AsyncClient:
    if _client is None:
        raise RuntimeError("Upstream client is not initialized")
    return _client


def _extract_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("detail")
    return None


class UpstreamClient:
    """单次请求范围内的上游访问器，携带调用方的会话头。"""

    def __init__(self, http_client: httpx.AsyncClient, headers: Optional[Mapping[str, str]] = None) -> None:
        self._http = http_client
        self._headers = dict(headers or {})

    @classmethod
    def forwarding(cls, http_client: httpx.AsyncClient, incoming: Mapping[str, str]) -> "UpstreamClient":
        """从入站请求头中挑选需要透传的字段。"""
        headers = {name: incoming[name] for name in FORWARDED_HEADERS if name in incoming}
        return cls(http_client, headers)

    async def request(self, method: str, path: str, *, json: Any = None) -> Any:
        headers = dict(self._headers)
        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id
        try:
            response = await self._http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            message = str(exc) or exc.__class__.__name__
            logger.error("Upstream %s %s unreachable: %s", method, path, message)
            raise UpstreamTransportError(message) from exc

        if response.is_error:
            detail = _extract_detail(response)
            logger.warning("Upstream %s %s answered %s: %s", method, path, response.status_code, detail)
            raise UpstreamError(
                response.status_code,
                detail,
                message=f"Request failed with status code {response.status_code}",
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
