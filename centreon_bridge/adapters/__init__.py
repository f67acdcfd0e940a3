"""
适配器模块

包含 Centreon HTTP 客户端、认证器和请求映射器。
"""

from .http_client import CentreonHttpClient
from .authenticator import Authenticator
from .request_mapper import CentreonRequestMapper

__all__ = [
    'CentreonHttpClient',
    'Authenticator',
    'CentreonRequestMapper'
]
