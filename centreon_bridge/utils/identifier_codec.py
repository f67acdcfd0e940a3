"""
复合标识编解码

将 (主机ID, 服务ID) 编码为单个字符串，用于单值下拉字段，
执行操作时再解码回原始二元组。
"""

import json
from typing import Any

from ..exceptions import IdentifierDecodeError
from ..models import ServiceIdentifier

_KEYS = ('host_id', 'service_id')


def encode(host_id: int, service_id: int) -> str:
    """编码复合标识

    Args:
        host_id: 主机ID
        service_id: 服务ID

    Returns:
        str: 紧凑 JSON，如 {"host_id":1,"service_id":2}
    """
    return json.dumps(
        {'host_id': int(host_id), 'service_id': int(service_id)},
        separators=(',', ':'),
        sort_keys=True,
    )


def decode(raw_value: Any) -> ServiceIdentifier:
    """解码复合标识

    Raises:
        IdentifierDecodeError: 格式错误、缺少字段或ID不是整数
    """
    if not isinstance(raw_value, str):
        raise IdentifierDecodeError(raw_value, "expected a string")
    try:
        data = json.loads(raw_value)
    except json.JSONDecodeError as e:
        raise IdentifierDecodeError(raw_value, f"not valid JSON ({e.msg})")

    if not isinstance(data, dict):
        raise IdentifierDecodeError(raw_value, "expected an object")

    values = []
    for key in _KEYS:
        if key not in data:
            raise IdentifierDecodeError(raw_value, f"missing {key}")
        value = data[key]
        # bool 是 int 的子类
        if isinstance(value, bool) or not isinstance(value, int):
            raise IdentifierDecodeError(raw_value, f"{key} must be an integer")
        values.append(value)

    return ServiceIdentifier(host_id=values[0], service_id=values[1])
