"""
桥接服务处理器模块

包含所有API请求处理器。
"""

from .health import HealthHandler
from .execute import ExecuteHandler
from .options import OptionsHandler

__all__ = [
    'HealthHandler',
    'ExecuteHandler',
    'OptionsHandler'
]
