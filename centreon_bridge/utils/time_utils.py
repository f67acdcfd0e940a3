"""
时间规范化工具

将本地格式的日期时间字符串规范化为 UTC 时间字符串，
并校验起止时间的先后顺序。
"""

import logging
from datetime import datetime, timezone
from typing import Union

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

CANONICAL_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

TimeInput = Union[str, datetime]


def parse_instant(value: TimeInput, field: str = 'time') -> datetime:
    """解析时间为带 UTC 时区的 datetime

    无时区信息的输入按 UTC 读数处理，不做时区换算；
    带偏移的输入换算到 UTC。

    Args:
        value: 时间字符串或 datetime
        field: 参数名，用于错误信息

    Returns:
        datetime: UTC 时间（已去除秒以下部分）

    Raises:
        ValidationError: 无法解析
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or '').strip()
        if not text:
            raise ValidationError(f"{field} is required", field=field)
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid {field}: {value!r}", field=field)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        parsed = parsed.astimezone(timezone.utc)

    return parsed.replace(microsecond=0)


def to_canonical_instant(value: TimeInput, field: str = 'time') -> str:
    """转换为规范 UTC 时间字符串，如 2024-01-01T10:00:00Z"""
    return parse_instant(value, field).strftime(CANONICAL_FORMAT)


def validate_order(start: TimeInput, end: TimeInput) -> None:
    """校验开始时间严格早于结束时间

    Raises:
        ValidationError: start >= end
    """
    start_at = parse_instant(start, 'start_time')
    end_at = parse_instant(end, 'end_time')
    if start_at >= end_at:
        logger.debug(f"Rejected time window {start_at.isoformat()} -> {end_at.isoformat()}")
        raise ValidationError("Start time must be before end time", field='end_time')
