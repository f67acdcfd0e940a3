"""
分页拉取

按 page/limit 逐页请求列表端点，直到服务端报告的总数被覆盖。
"""

import logging
from typing import Dict, List, Any, Optional

from ..adapters.http_client import CentreonHttpClient
from ..exceptions import ValidationError
from ..models import PaginationCursor, RequestDescriptor

logger = logging.getLogger(__name__)


def extract_records(endpoint: str, payload: Any) -> List[Dict[str, Any]]:
    """提取 result 列表，结构不符时抛出 ValidationError"""
    if not isinstance(payload, dict) or not isinstance(payload.get('result'), list):
        raise ValidationError(f"Invalid response from Centreon for {endpoint}: missing result list")
    return payload['result']


async def fetch_all_pages(client: CentreonHttpClient, token: str, endpoint: str,
                          page_size: int, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
    """拉取全部分页记录

    终止条件只依据 page * limit >= total（或缺少分页元数据），
    不依据已取回的记录数。

    Args:
        client: HTTP客户端
        token: 会话令牌
        endpoint: 列表端点
        page_size: 每页条数
        params: 附加查询参数（如 search）

    Returns:
        List[Dict[str, Any]]: 按页顺序累积的记录
    """
    if page_size <= 0:
        raise ValidationError("page_size must be positive", field='page_size')

    cursor = PaginationCursor(limit=page_size)
    records: List[Dict[str, Any]] = []

    while True:
        query = {**(params or {}), 'page': cursor.page, 'limit': cursor.limit}
        payload = await client.request(token, RequestDescriptor('GET', endpoint, params=query))
        page_records = extract_records(endpoint, payload)
        records.extend(page_records)

        has_more = cursor.update(payload.get('meta'))
        logger.debug(
            f"Fetched page {cursor.page} of {endpoint}: {len(page_records)} records, "
            f"total={cursor.total}"
        )
        if not has_more:
            break
        cursor.advance()

    return records
