"""
桥接层工具函数集合

提供时间规范化和复合标识编解码等纯函数工具。
"""

from .time_utils import (
    parse_instant,
    to_canonical_instant,
    validate_order
)

from . import identifier_codec

__all__ = [
    # 时间工具
    'parse_instant',
    'to_canonical_instant',
    'validate_order',

    # 标识编解码
    'identifier_codec'
]
