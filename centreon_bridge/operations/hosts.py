"""
主机操作处理函数

每个函数对应一个 (host, operation) 组合：解析输入契约、构造请求描述、调用请求客户端。
"""

import logging
from typing import Any

from ..adapters.request_mapper import CentreonRequestMapper, HOSTS_MONITORING
from ..models import ExecutionContext
from .common import list_records, ok
from .inputs import (
    ItemParameters, ListInput, HostAddInput, HostTargetInput,
    AcknowledgeInput, DowntimeInput
)

logger = logging.getLogger(__name__)

_mapper = CentreonRequestMapper()


async def list_hosts(context: ExecutionContext, params: ItemParameters) -> Any:
    return await list_records(context, HOSTS_MONITORING, 'host.name', ListInput.from_params(params))


async def add_host(context: ExecutionContext, params: ItemParameters) -> Any:
    data = HostAddInput.from_params(params)
    descriptor = _mapper.map_host_add(
        name=data.name,
        address=data.address,
        monitoring_server_id=data.monitoring_server_id,
        alias=data.alias,
        templates=data.templates,
        groups=data.groups,
        macros=data.macros,
    )
    response = await context.client.request(context.token, descriptor)
    logger.info(f"Created host {data.name}")
    return ok(response, name=data.name)


async def delete_host(context: ExecutionContext, params: ItemParameters) -> Any:
    data = HostTargetInput.from_params(params)
    response = await context.client.request(context.token, _mapper.map_host_delete(data.host_id))
    return ok(response, host_id=data.host_id)


async def acknowledge_host(context: ExecutionContext, params: ItemParameters) -> Any:
    target = HostTargetInput.from_params(params)
    data = AcknowledgeInput.from_params(params)
    descriptor = _mapper.map_acknowledgement(
        _mapper.host_monitoring_path(target.host_id),
        comment=data.comment,
        notify=data.notify,
        sticky=data.sticky,
        persistent=data.persistent,
        with_services=data.with_services,
    )
    response = await context.client.request(context.token, descriptor)
    return ok(response, host_id=target.host_id)


async def schedule_host_downtime(context: ExecutionContext, params: ItemParameters) -> Any:
    target = HostTargetInput.from_params(params)
    data = DowntimeInput.from_params(params)
    descriptor = _mapper.map_downtime(
        _mapper.host_monitoring_path(target.host_id), data.window, include_services=True
    )
    response = await context.client.request(context.token, descriptor)
    return ok(response, host_id=target.host_id)
