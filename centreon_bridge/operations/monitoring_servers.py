"""
监控服务器操作处理函数
"""

from typing import Any

from ..adapters.request_mapper import CentreonRequestMapper, MONITORING_SERVERS
from ..coordinators.bulk_aggregator import BulkAggregator
from ..models import ExecutionContext
from .common import list_records
from .inputs import ItemParameters, ListInput, ApplyConfigurationInput

_mapper = CentreonRequestMapper()


async def list_monitoring_servers(context: ExecutionContext, params: ItemParameters) -> Any:
    return await list_records(context, MONITORING_SERVERS, 'name', ListInput.from_params(params))


async def apply_configuration(context: ExecutionContext, params: ItemParameters) -> Any:
    """为每个监控服务器生成并重载配置"""
    data = ApplyConfigurationInput.from_params(params)
    return await BulkAggregator(context).apply_to_many(
        data.server_ids,
        _mapper.map_generate_and_reload,
        continue_on_fail=data.continue_on_fail,
    )
