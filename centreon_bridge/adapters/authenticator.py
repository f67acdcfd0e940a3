"""
Centreon 认证器

用登录名/密码换取短期会话令牌，每次调用只尝试一次，不缓存。
"""

import logging
from typing import Any

from ..exceptions import ApiRequestError, AuthenticationError
from ..models import Credentials
from .http_client import CentreonHttpClient

logger = logging.getLogger(__name__)

LOGIN_ENDPOINT = '/login'


class Authenticator:
    """会话令牌获取"""

    def __init__(self, client: CentreonHttpClient):
        self._client = client

    @staticmethod
    def build_login_body(credentials: Credentials) -> dict:
        return {
            'security': {
                'credentials': {
                    'login': credentials.username,
                    'password': credentials.password,
                }
            }
        }

    async def authenticate(self, credentials: Credentials) -> str:
        """获取会话令牌

        Args:
            credentials: Centreon 凭据

        Returns:
            str: 会话令牌

        Raises:
            AuthenticationError: 响应中没有令牌（凭据被拒绝同样归入此类）
        """
        logger.info(f"Authenticating to {credentials.normalized_base_url} as {credentials.username}")

        try:
            response = await self._client.send(
                'POST', LOGIN_ENDPOINT, body=self.build_login_body(credentials)
            )
        except ApiRequestError as e:
            logger.error(f"Centreon login failed: {e.upstream_message}")
            raise AuthenticationError(details={
                'status': e.status,
                'upstream_message': e.upstream_message,
            }) from e

        token = self._extract_token(response)
        if not token:
            logger.error("Centreon login response did not contain a token")
            raise AuthenticationError()

        logger.debug("Centreon session token acquired")
        return token

    @staticmethod
    def _extract_token(response: Any) -> str:
        if not isinstance(response, dict):
            return ''
        security = response.get('security')
        if not isinstance(security, dict):
            return ''
        token = security.get('token')
        return token if isinstance(token, str) else ''
