"""
桥接服务路由

所有路由集中在一张表里注册，并统一挂上 CORS 设置。
"""

from typing import Optional

from aiohttp import web
from aiohttp_cors import CorsConfig

from ..handlers import ExecuteHandler, HealthHandler, OptionsHandler


def setup_routes(app: web.Application, cors: Optional[CorsConfig] = None):
    """注册路由

    Args:
        app: aiohttp应用实例
        cors: CORS配置对象，为空时不配置跨域
    """
    health = HealthHandler()
    execute = ExecuteHandler()
    options = OptionsHandler()

    table = [
        ('GET', '/health', health.health_check),
        ('GET', '/api/v1/info', health.api_info),
        ('POST', '/api/v1/execute', execute.execute),
        ('GET', '/api/v1/options', options.list_sources),
        ('GET', '/api/v1/options/{source}', options.load_options),
    ]

    for method, path, handler in table:
        route = app.router.add_route(method, path, handler)
        if cors:
            cors.add(route)
