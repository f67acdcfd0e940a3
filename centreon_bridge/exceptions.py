"""
Centreon 桥接层异常处理模块

定义认证、请求、参数验证和操作分发各环节的异常类型，
提供统一的错误响应格式和敏感信息屏蔽工具。
"""

import re
from datetime import datetime
from typing import Dict, Any, Optional


class BridgeException(Exception):
    """桥接层基础异常类"""

    def __init__(self, message: str, error_code: str = "BRIDGE_ERROR",
                 component: str = "unknown", details: Optional[Dict[str, Any]] = None):
        """初始化异常

        Args:
            message: 错误消息
            error_code: 错误代码
            component: 出错组件
            details: 错误详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.component = component
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'component': self.component,
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


class AuthenticationError(BridgeException):
    """认证异常：登录响应中没有返回令牌"""

    def __init__(self, message: str = "Authentication failed: no token returned",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "AUTHENTICATION_ERROR", "Authenticator", details)


class ApiRequestError(BridgeException):
    """API请求异常，包装上游传输错误或非2xx响应"""

    def __init__(self, method: str, endpoint: str, message: str,
                 status: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        self.method = method
        self.endpoint = endpoint
        self.status = status
        error_details = details or {}
        error_details.update({
            'method': method,
            'endpoint': endpoint,
            'status': status
        })
        super().__init__(
            f"{method} {endpoint} failed: {message}",
            "API_REQUEST_ERROR",
            "RequestClient",
            error_details
        )
        self.upstream_message = message


class ValidationError(BridgeException):
    """参数或响应结构验证异常"""

    def __init__(self, message: str, field: Optional[str] = None,
                 error_code: str = "VALIDATION_ERROR",
                 details: Optional[Dict[str, Any]] = None):
        self.field = field
        error_details = details or {}
        if field:
            error_details['field'] = field
        super().__init__(message, error_code, "Validator", error_details)


class IdentifierDecodeError(ValidationError):
    """复合标识解码异常"""

    def __init__(self, raw_value: Any, reason: str):
        self.raw_value = raw_value
        super().__init__(
            f"Invalid service identifier {raw_value!r}: {reason}",
            field='service',
            error_code="IDENTIFIER_DECODE_ERROR"
        )


class OperationError(BridgeException):
    """未识别的资源/操作组合"""

    def __init__(self, resource: Any, operation: Any,
                 details: Optional[Dict[str, Any]] = None):
        self.resource = resource
        self.operation = operation
        error_details = details or {}
        error_details.update({'resource': resource, 'operation': operation})
        super().__init__(
            f"The operation \"{operation}\" is not known for resource \"{resource}\"",
            "OPERATION_ERROR",
            "Dispatcher",
            error_details
        )


class ConfigurationException(BridgeException):
    """配置异常"""

    def __init__(self, config_key: str, message: str,
                 details: Optional[Dict[str, Any]] = None):
        self.config_key = config_key
        error_details = details or {}
        error_details.update({'config_key': config_key})
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            "CONFIGURATION_ERROR",
            "ConfigManager",
            error_details
        )


# 登录请求体、令牌头以及常见的 key=value / "key": "value" 形式
_SECRET_KEYS = ('password', 'x-auth-token', 'token', 'secret')
_SECRET_PATTERN = re.compile(
    r'(?P<key>"?(?:' + '|'.join(re.escape(k) for k in _SECRET_KEYS) + r')"?)'
    r'(?P<sep>\s*[:=]\s*)"?[^"\s,}]+"?',
    re.IGNORECASE,
)


def mask_sensitive_info(message: str) -> str:
    """屏蔽消息中的密码和会话令牌"""
    return _SECRET_PATTERN.sub(lambda m: f"{m.group('key')}{m.group('sep')}***", message)


def _mask_sensitive_details(details: Dict[str, Any]) -> Dict[str, Any]:
    markers = ('password', 'token', 'secret', 'auth', 'credential')
    return {
        key: '***' if any(marker in key.lower() for marker in markers) else value
        for key, value in details.items()
    }


def handle_exception(exception: Exception, component: str = "unknown",
                     context: Optional[Dict[str, Any]] = None,
                     mask_sensitive: bool = True) -> BridgeException:
    """将任意异常包装为 BridgeException

    Args:
        exception: 原始异常
        component: 出错组件
        context: 附加上下文，写入 details
        mask_sensitive: 是否屏蔽密码和令牌

    Returns:
        BridgeException: 已是桥接层异常时原样返回
    """
    if isinstance(exception, BridgeException):
        return exception

    message = str(exception)
    details = dict(context or {})
    if mask_sensitive:
        message = mask_sensitive_info(message)
        details = _mask_sensitive_details(details)
    details['original_exception_type'] = type(exception).__name__

    return BridgeException(message, "WRAPPED_EXCEPTION", component, details)


def create_error_response(exception: BridgeException) -> Dict[str, Any]:
    """HTTP 错误信封：{success, error, error_code, component, details, timestamp}，消息已屏蔽"""
    error = exception.to_dict()
    return {
        'success': False,
        'error': mask_sensitive_info(error['message']),
        'error_code': error['error_code'],
        'component': error['component'],
        'details': error['details'],
        'timestamp': error['timestamp'],
    }


_HTTP_STATUS = (
    (ValidationError, 400),
    (OperationError, 400),
    (AuthenticationError, 401),
    (ApiRequestError, 502),
)


def http_status_for(exception: BridgeException) -> int:
    """异常类型对应的HTTP状态码，未列出的类型为 500"""
    for exc_type, status in _HTTP_STATUS:
        if isinstance(exception, exc_type):
            return status
    return 500
