"""
下拉选项处理器
"""

from aiohttp import web

from .base import BaseHandler
from ..exceptions import BridgeException
from ..loaders.options_loader import OptionsLoader, OPTION_SOURCES


class OptionsHandler(BaseHandler):
    """下拉选项处理器"""

    async def list_sources(self, request: web.Request) -> web.Response:
        return self.success_response(sorted(OPTION_SOURCES))

    async def load_options(self, request: web.Request) -> web.Response:
        """加载具名选项

        Args:
            request: HTTP请求对象，路径参数 source

        Returns:
            web.Response: [{name, value}]
        """
        source = request.match_info['source']
        loader: OptionsLoader = request.app['options_loader']

        try:
            options = await loader.load(source)
        except BridgeException as e:
            self.logger.error(f"Loading options '{source}' failed: {e.message}")
            return self.bridge_error_response(e)

        return self.success_response(options)
