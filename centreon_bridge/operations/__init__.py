"""
操作处理模块

静态处理表：(资源, 操作) -> 处理函数。
"""

from typing import Any, Awaitable, Callable, Dict, Tuple

from ..models import ExecutionContext, Operation, Resource
from . import hosts, services, monitoring_servers
from .inputs import ItemParameters

Handler = Callable[[ExecutionContext, ItemParameters], Awaitable[Any]]

HANDLERS: Dict[Tuple[Resource, Operation], Handler] = {
    (Resource.HOST, Operation.LIST): hosts.list_hosts,
    (Resource.HOST, Operation.ADD): hosts.add_host,
    (Resource.HOST, Operation.DELETE): hosts.delete_host,
    (Resource.HOST, Operation.ACKNOWLEDGE): hosts.acknowledge_host,
    (Resource.HOST, Operation.DOWNTIME): hosts.schedule_host_downtime,

    (Resource.SERVICE, Operation.LIST): services.list_services,
    (Resource.SERVICE, Operation.ADD): services.add_service,
    (Resource.SERVICE, Operation.DELETE): services.delete_service,
    (Resource.SERVICE, Operation.ACKNOWLEDGE): services.acknowledge_service,
    (Resource.SERVICE, Operation.DOWNTIME): services.schedule_service_downtime,

    (Resource.MONITORING_SERVER, Operation.LIST): monitoring_servers.list_monitoring_servers,
    (Resource.MONITORING_SERVER, Operation.APPLY_CONFIGURATION): monitoring_servers.apply_configuration,
}

__all__ = [
    'HANDLERS',
    'Handler',
    'ItemParameters'
]
