"""
健康检查处理器
"""

import time

from aiohttp import web

from .base import BaseHandler
from .. import __version__
from ..api_info import get_api_info


class HealthHandler(BaseHandler):
    """健康检查与服务元信息

    只报告本服务状态，不探测 Centreon 连通性，
    以免每次探活都产生一次登录。
    """

    def __init__(self):
        super().__init__()
        self.started_at = time.monotonic()

    async def health_check(self, request: web.Request) -> web.Response:
        config = request.app['config']
        return self.success_response({
            'status': 'healthy',
            'version': __version__,
            'uptime_seconds': round(time.monotonic() - self.started_at, 3),
            'environment': config.environment,
            'centreon': {
                'base_url': config.centreon.base_url,
                'api_version': config.centreon.api_version,
                'ignore_ssl': bool(config.centreon.ignore_ssl),
            },
        })

    async def api_info(self, request: web.Request) -> web.Response:
        return self.success_response(get_api_info(request.app.router))
