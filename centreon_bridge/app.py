"""
桥接服务应用工厂
"""

import logging

import aiohttp_cors
from aiohttp import web

from .config import BridgeConfig
from .coordinators.dispatcher import Dispatcher
from .loaders.options_loader import OptionsLoader
from .middleware import setup_middleware
from .routes import setup_routes

logger = logging.getLogger(__name__)


def create_app(config: BridgeConfig) -> web.Application:
    """创建 aiohttp 应用

    分发器和选项加载器无状态，整个进程共用一份；
    会话令牌按批处理获取，不挂在应用上。

    Args:
        config: 桥接层配置

    Returns:
        web.Application: 应用实例
    """
    app = web.Application()
    app['config'] = config
    app['dispatcher'] = Dispatcher(config)
    app['options_loader'] = OptionsLoader(config)

    setup_middleware(app)

    # 下拉选项由浏览器端表单直接请求
    cors = aiohttp_cors.setup(app, defaults={
        "*": aiohttp_cors.ResourceOptions(
            allow_credentials=True,
            expose_headers="*",
            allow_headers="*",
            allow_methods="*",
        )
    })
    setup_routes(app, cors)

    logger.info(f"Bridge application ready for {config.centreon.base_url} ({config.environment})")
    return app
