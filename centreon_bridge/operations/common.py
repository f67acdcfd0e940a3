"""
操作层公共函数
"""

import logging
from typing import Dict, Any

from ..adapters.request_mapper import CentreonRequestMapper, build_list_params
from ..loaders.pagination import fetch_all_pages, extract_records
from ..models import ExecutionContext
from .inputs import ListInput

logger = logging.getLogger(__name__)

_mapper = CentreonRequestMapper()


def ok(response: Any, **extra: Any) -> Any:
    """无响应体的写操作（HTTP 204）返回成功标记"""
    if response:
        return response
    return {'success': True, **extra}


async def list_records(context: ExecutionContext, endpoint: str, field: str,
                       data: ListInput) -> Dict[str, Any]:
    """列表查询

    return_all 为真时按游标逐页拉取全部记录，否则按 limit 单次请求。
    """
    if data.return_all:
        params = build_list_params(field, data.name_filter, data.exact_match)
        records = await fetch_all_pages(
            context.client, context.token, endpoint, context.page_size, params
        )
        return {'result': records, 'meta': {'total': len(records)}}

    limit = data.limit if data.limit is not None else context.default_list_limit
    descriptor = _mapper.map_list(endpoint, field, data.name_filter, data.exact_match, limit)
    response = await context.client.request(context.token, descriptor)
    extract_records(endpoint, response)
    return response
