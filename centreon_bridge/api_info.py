"""
服务元信息，用于 /api/v1/info。
"""

from typing import Any, Dict, Optional

from aiohttp import web

from . import __version__
from .models import Operation, Resource
from .operations import HANDLERS


def get_api_info(router: Optional[web.UrlDispatcher] = None) -> Dict[str, Any]:
    """返回服务名称、版本、已注册路由以及支持的资源/操作组合"""
    endpoints = []
    if router is not None:
        for route in router.routes():
            if route.method in ('HEAD', 'OPTIONS'):
                continue
            endpoints.append({'method': route.method, 'path': route.resource.canonical})

    operations: Dict[str, list] = {}
    for resource, operation in HANDLERS:
        operations.setdefault(resource.value, []).append(operation.value)

    return {
        'service': 'centreon-bridge',
        'version': __version__,
        'resources': [r.value for r in Resource],
        'operations': operations,
        'known_operations': [o.value for o in Operation],
        'endpoints': endpoints,
    }
