"""
桥接服务中间件

请求上下文（请求ID与耗时）以及未捕获异常的兜底转换。
"""

import logging
import time
import traceback
import uuid
from datetime import datetime
from typing import Any, Callable, Dict

from aiohttp import web
from aiohttp.web_middlewares import middleware

from .exceptions import (
    BridgeException, create_error_response, handle_exception, http_status_for, mask_sensitive_info
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'


def _stamp(response: web.StreamResponse, request_id: str, started: float) -> None:
    response.headers[REQUEST_ID_HEADER] = request_id
    response.headers['X-Response-Time'] = f"{time.monotonic() - started:.3f}s"


@middleware
async def request_context_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """请求上下文中间件

    沿用调用方传入的 X-Request-ID，否则生成新的ID；
    记录方法、路径、状态和耗时，不记录请求体。
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    request['request_id'] = request_id
    started = time.monotonic()

    try:
        response = await handler(request)
    except web.HTTPException as e:
        _stamp(e, request_id, started)
        logger.info(f"{request.method} {request.path} -> {e.status} [{request_id}]")
        raise

    _stamp(response, request_id, started)
    logger.info(
        f"{request.method} {request.path} -> {response.status} "
        f"in {response.headers['X-Response-Time']} [{request_id}]"
    )
    return response


@middleware
async def error_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """异常兜底中间件

    处理器未转换的 BridgeException 按类型映射状态码，
    其余异常返回 500，调试模式下附带堆栈。
    """
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except BridgeException as e:
        logger.warning(f"Unconverted {type(e).__name__} on {request.path}: {mask_sensitive_info(e.message)}")
        return web.json_response(create_error_response(e), status=http_status_for(e))
    except Exception as e:
        wrapped = handle_exception(e, "HttpService", {'path': request.path, 'method': request.method})
        logger.exception(f"Unhandled error on {request.path}: {wrapped.message}")
        body: Dict[str, Any] = {
            'success': False,
            'error': 'Internal server error',
            'error_code': wrapped.error_code,
            'error_type': wrapped.details['original_exception_type'],
            'request_id': request.get('request_id'),
            'timestamp': datetime.utcnow().isoformat() + 'Z',
        }
        config = request.app.get('config')
        if config and config.service.debug:
            body['error_detail'] = wrapped.message
            body['traceback'] = traceback.format_exc()
        return web.json_response(body, status=500)


def setup_middleware(app: web.Application):
    # 外层先执行：上下文中间件能为兜底生成的错误响应补上请求ID
    app.middlewares.append(request_context_middleware)
    app.middlewares.append(error_middleware)
