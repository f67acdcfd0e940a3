"""
处理器基类

统一的 JSON 信封：成功为 {success, data, message}，
失败为 {success, error, error_code, component, details, timestamp}。
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from aiohttp import web

from ..exceptions import BridgeException, ValidationError, create_error_response, http_status_for


class BaseHandler:
    """处理器基类"""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @staticmethod
    def _timestamp() -> str:
        return datetime.utcnow().isoformat() + 'Z'

    def success_response(self, data: Any = None, message: str = "操作成功") -> web.Response:
        return web.json_response({
            'success': True,
            'data': data,
            'message': message,
            'timestamp': self._timestamp(),
        })

    def error_response(self, message: str, code: int = 400, error_code: Optional[str] = None,
                       details: Optional[Dict[str, Any]] = None) -> web.Response:
        return web.json_response({
            'success': False,
            'error': message,
            'error_code': error_code,
            'details': details or {},
            'timestamp': self._timestamp(),
        }, status=code)

    def bridge_error_response(self, exception: BridgeException) -> web.Response:
        """按异常类型映射状态码：参数/操作 400，认证 401，上游 502"""
        return web.json_response(create_error_response(exception), status=http_status_for(exception))

    async def get_request_json(self, request: web.Request) -> Any:
        """读取 JSON 请求体

        Raises:
            ValidationError: 请求体不是合法 JSON
        """
        if not request.can_read_body:
            return {}
        try:
            return await request.json()
        except json.JSONDecodeError as e:
            self.logger.warning(f"Rejected malformed JSON body: {e.msg}")
            raise ValidationError(f"Request body is not valid JSON: {e.msg}", field='body')
