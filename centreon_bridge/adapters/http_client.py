"""
Centreon HTTP客户端

提供带会话令牌的统一 Centreon REST API 调用接口。
"""

import asyncio
import logging
from typing import Dict, Any, Optional, Mapping

import aiohttp

from ..exceptions import ApiRequestError, mask_sensitive_info
from ..models import Credentials, RequestDescriptor

logger = logging.getLogger(__name__)

TOKEN_HEADER = 'X-AUTH-TOKEN'


class CentreonHttpClient:
    """Centreon HTTP客户端

    一个实例对应一次批处理或一次选项加载，持有一个 aiohttp 会话。
    不做重试，不检查传输层之外的状态码。
    """

    def __init__(self, credentials: Credentials, api_version: str = 'latest',
                 request_timeout: Optional[int] = None):
        """初始化HTTP客户端

        Args:
            credentials: Centreon 凭据
            api_version: API版本，如 latest、v24.10
            request_timeout: 请求超时（秒），None 表示使用 aiohttp 默认值
        """
        self.credentials = credentials
        self.api_version = api_version
        self.request_timeout = request_timeout
        self._session: Optional[aiohttp.ClientSession] = None

        # 统计信息
        self._request_count = 0
        self._success_count = 0
        self._error_count = 0

    @property
    def api_root(self) -> str:
        return f"{self.credentials.normalized_base_url}/api/{self.api_version}"

    def build_url(self, endpoint: str) -> str:
        """拼接完整URL"""
        if not endpoint.startswith('/'):
            endpoint = f"/{endpoint}"
        return f"{self.api_root}{endpoint}"

    async def start(self):
        """启动HTTP客户端"""
        if self._session:
            return

        kwargs: Dict[str, Any] = {
            'headers': {'Content-Type': 'application/json'},
        }
        if self.request_timeout:
            kwargs['timeout'] = aiohttp.ClientTimeout(total=self.request_timeout)

        self._session = aiohttp.ClientSession(**kwargs)
        logger.debug(f"HTTP client for {self.api_root} started")

    async def stop(self):
        """停止HTTP客户端"""
        if self._session:
            await self._session.close()
            self._session = None
            logger.debug(f"HTTP client for {self.api_root} stopped")

    async def __aenter__(self) -> 'CentreonHttpClient':
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def request(self, token: str, descriptor: RequestDescriptor) -> Any:
        """携带会话令牌执行一次请求

        Args:
            token: 会话令牌
            descriptor: 请求描述

        Returns:
            Any: 响应体（空响应返回空字典）

        Raises:
            ApiRequestError: 传输失败或非2xx响应
        """
        headers = {TOKEN_HEADER: token}
        return await self.send(
            descriptor.method,
            descriptor.endpoint,
            body=descriptor.body,
            params=descriptor.params,
            headers=headers,
        )

    async def send(self, method: str, endpoint: str,
                   body: Optional[Mapping[str, Any]] = None,
                   params: Optional[Mapping[str, Any]] = None,
                   headers: Optional[Dict[str, str]] = None) -> Any:
        """执行HTTP请求

        Args:
            method: HTTP方法
            endpoint: API端点（相对 /api/{version}）
            body: JSON请求体
            params: 查询参数
            headers: 额外请求头

        Returns:
            Any: 响应数据

        Raises:
            ApiRequestError: 请求失败
        """
        if not self._session:
            await self.start()

        method = method.upper()
        url = self.build_url(endpoint)

        kwargs: Dict[str, Any] = {
            'headers': {'Content-Type': 'application/json', **(headers or {})},
        }
        if body is not None:
            kwargs['json'] = dict(body)
        if params:
            kwargs['params'] = {k: str(v) for k, v in params.items()}
        if self.credentials.ignore_ssl:
            kwargs['ssl'] = False

        self._request_count += 1
        logger.debug(f"{method} {url}")

        try:
            async with self._session.request(method, url, **kwargs) as response:
                text = await response.text()
                if response.status >= 400:
                    self._error_count += 1
                    message = mask_sensitive_info(text.strip()) or response.reason or 'request failed'
                    raise ApiRequestError(
                        method, endpoint, f"HTTP {response.status}: {message}",
                        status=response.status
                    )

                self._success_count += 1
                if not text.strip():
                    return {}
                try:
                    return await response.json(content_type=None)
                except ValueError:
                    return {'raw': text}

        except asyncio.TimeoutError:
            self._error_count += 1
            logger.warning(f"{method} {endpoint} timed out after {self.request_timeout}s")
            raise ApiRequestError(method, endpoint, "request timed out")
        except aiohttp.ClientError as e:
            self._error_count += 1
            logger.warning(f"{method} {endpoint} transport error: {e}")
            raise ApiRequestError(method, endpoint, str(e))

    def get_statistics(self) -> Dict[str, Any]:
        """获取统计信息

        Returns:
            Dict[str, Any]: 统计信息
        """
        return {
            'api_root': self.api_root,
            'request_count': self._request_count,
            'success_count': self._success_count,
            'error_count': self._error_count,
            'success_rate': self._success_count / max(self._request_count, 1)
        }
