"""
服务操作处理函数
"""

import logging
from typing import Any

from ..adapters.request_mapper import CentreonRequestMapper, SERVICES_MONITORING
from ..models import ExecutionContext
from .common import list_records, ok
from .inputs import (
    ItemParameters, ListInput, ServiceAddInput, ServiceTargetInput,
    AcknowledgeInput, DowntimeInput
)

logger = logging.getLogger(__name__)

_mapper = CentreonRequestMapper()


async def list_services(context: ExecutionContext, params: ItemParameters) -> Any:
    return await list_records(
        context, SERVICES_MONITORING, 'service.description', ListInput.from_params(params)
    )


async def add_service(context: ExecutionContext, params: ItemParameters) -> Any:
    data = ServiceAddInput.from_params(params)
    descriptor = _mapper.map_service_add(
        name=data.name,
        host_id=data.host_id,
        service_template_id=data.service_template_id,
        macros=data.macros,
    )
    response = await context.client.request(context.token, descriptor)
    logger.info(f"Created service {data.name} on host {data.host_id}")
    return ok(response, name=data.name, host_id=data.host_id)


async def delete_service(context: ExecutionContext, params: ItemParameters) -> Any:
    target = ServiceTargetInput.from_params(params)
    response = await context.client.request(
        context.token, _mapper.map_service_delete(target.identifier)
    )
    return ok(response, service_id=target.identifier.service_id)


async def acknowledge_service(context: ExecutionContext, params: ItemParameters) -> Any:
    target = ServiceTargetInput.from_params(params)
    data = AcknowledgeInput.from_params(params)
    descriptor = _mapper.map_acknowledgement(
        _mapper.service_monitoring_path(target.identifier),
        comment=data.comment,
        notify=data.notify,
        sticky=data.sticky,
        persistent=data.persistent,
    )
    response = await context.client.request(context.token, descriptor)
    return ok(response, host_id=target.identifier.host_id,
              service_id=target.identifier.service_id)


async def schedule_service_downtime(context: ExecutionContext, params: ItemParameters) -> Any:
    target = ServiceTargetInput.from_params(params)
    data = DowntimeInput.from_params(params)
    descriptor = _mapper.map_downtime(
        _mapper.service_monitoring_path(target.identifier), data.window
    )
    response = await context.client.request(context.token, descriptor)
    return ok(response, host_id=target.identifier.host_id,
              service_id=target.identifier.service_id)
