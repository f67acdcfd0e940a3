"""
Centreon 请求映射器

将操作层的输入契约转换为 Centreon API 的请求描述，
负责检索表达式、宏列表以及确认/停机请求体的格式化。
"""

import json
import logging
from typing import Dict, List, Any, Optional

from ..models import RequestDescriptor, ServiceIdentifier, DowntimeWindow, transform_macros

logger = logging.getLogger(__name__)


# 端点定义
HOSTS_MONITORING = '/monitoring/hosts'
HOSTS_CONFIGURATION = '/configuration/hosts'
HOST_TEMPLATES = '/configuration/hosts/templates'
HOST_GROUPS = '/configuration/hosts/groups'
SERVICES_MONITORING = '/monitoring/services'
SERVICES_CONFIGURATION = '/configuration/services'
SERVICE_TEMPLATES = '/configuration/services/templates'
MONITORING_SERVERS = '/configuration/monitoring-servers'


def build_search_expression(field: str, value: str, exact: bool = False) -> Dict[str, Any]:
    """构建检索表达式

    模糊匹配时若值中没有通配符则两侧补 %。
    """
    if exact:
        condition = {'$eq': value}
    else:
        pattern = value if '%' in value else f"%{value}%"
        condition = {'$lk': pattern}
    return {'$and': [{field: condition}]}


def build_list_params(field: str, name_filter: Optional[str] = None,
                      exact: bool = False, limit: Optional[int] = None) -> Dict[str, Any]:
    """构建列表查询参数，检索表达式序列化为单个 search 参数"""
    params: Dict[str, Any] = {}
    if name_filter:
        params['search'] = json.dumps(
            build_search_expression(field, name_filter, exact), separators=(',', ':')
        )
    if limit is not None:
        params['limit'] = int(limit)
    return params


class CentreonRequestMapper:
    """Centreon 请求映射器"""

    def map_list(self, endpoint: str, field: str, name_filter: Optional[str] = None,
                 exact: bool = False, limit: Optional[int] = None) -> RequestDescriptor:
        params = build_list_params(field, name_filter, exact, limit)
        return RequestDescriptor('GET', endpoint, params=params or None)

    def map_host_add(self, name: str, address: str, monitoring_server_id: int,
                     alias: Optional[str] = None, templates: Optional[List[int]] = None,
                     groups: Optional[List[int]] = None,
                     macros: Optional[List[Dict[str, Any]]] = None) -> RequestDescriptor:
        """映射主机创建请求

        Args:
            name: 主机名
            address: IP地址或DNS名
            monitoring_server_id: 监控服务器ID
            alias: 别名，缺省与主机名相同
            templates: 主机模板ID列表
            groups: 主机组ID列表
            macros: 宏列表

        Returns:
            RequestDescriptor: POST /configuration/hosts
        """
        body = {
            'monitoring_server_id': int(monitoring_server_id),
            'name': name,
            'alias': alias or name,
            'address': address,
            'templates': [int(t) for t in (templates or [])],
            'groups': [int(g) for g in (groups or [])],
            'macros': transform_macros(macros),
        }
        logger.debug(f"Mapped host add request for {name}")
        return RequestDescriptor('POST', HOSTS_CONFIGURATION, body=body)

    def map_service_add(self, name: str, host_id: int,
                        service_template_id: Optional[int] = None,
                        macros: Optional[List[Dict[str, Any]]] = None) -> RequestDescriptor:
        body: Dict[str, Any] = {
            'name': name,
            'host_id': int(host_id),
            'macros': transform_macros(macros),
        }
        if service_template_id is not None:
            body['service_template_id'] = int(service_template_id)
        logger.debug(f"Mapped service add request for {name} on host {host_id}")
        return RequestDescriptor('POST', SERVICES_CONFIGURATION, body=body)

    def map_host_delete(self, host_id: int) -> RequestDescriptor:
        return RequestDescriptor('DELETE', f"{HOSTS_CONFIGURATION}/{int(host_id)}")

    def map_service_delete(self, identifier: ServiceIdentifier) -> RequestDescriptor:
        return RequestDescriptor('DELETE', f"{SERVICES_CONFIGURATION}/{identifier.service_id}")

    def map_acknowledgement(self, endpoint: str, comment: str, notify: bool, sticky: bool,
                            persistent: bool, with_services: Optional[bool] = None) -> RequestDescriptor:
        """映射确认请求，with_services 仅对主机有效"""
        body: Dict[str, Any] = {
            'comment': comment,
            'is_notify_contacts': bool(notify),
            'is_persistent_comment': bool(persistent),
            'is_sticky': bool(sticky),
        }
        if with_services is not None:
            body['with_services'] = bool(with_services)
        return RequestDescriptor('POST', f"{endpoint}/acknowledgements", body=body)

    def map_downtime(self, endpoint: str, window: DowntimeWindow,
                     include_services: bool = False) -> RequestDescriptor:
        """映射停机请求，include_services 为真时携带 with_services（仅主机）"""
        body: Dict[str, Any] = {
            'comment': window.comment,
            'start_time': window.start_time,
            'end_time': window.end_time,
            'is_fixed': window.fixed,
            'duration': int(window.duration),
        }
        if include_services:
            body['with_services'] = window.with_services
        return RequestDescriptor('POST', f"{endpoint}/downtimes", body=body)

    def map_generate_and_reload(self, server_id: Any) -> RequestDescriptor:
        return RequestDescriptor('POST', f"{MONITORING_SERVERS}/{int(server_id)}/generate-and-reload")

    @staticmethod
    def host_monitoring_path(host_id: int) -> str:
        return f"{HOSTS_MONITORING}/{int(host_id)}"

    @staticmethod
    def service_monitoring_path(identifier: ServiceIdentifier) -> str:
        return f"{HOSTS_MONITORING}/{identifier.host_id}/services/{identifier.service_id}"
