"""
下拉选项加载器

为界面选择字段认证并分页拉取 Centreon 列表端点，
生成 name/value 选项对。服务选项的值为复合标识编码。
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Any, Optional, Callable

from ..adapters.authenticator import Authenticator
from ..adapters.http_client import CentreonHttpClient
from ..adapters import request_mapper as endpoints
from ..config import BridgeConfig
from ..exceptions import OperationError, ValidationError
from ..models import OptionItem
from ..utils import identifier_codec
from .pagination import fetch_all_pages

logger = logging.getLogger(__name__)


def _simple_option(label_field: str, value_field: str) -> Callable[[Dict[str, Any]], OptionItem]:
    def build(record: Dict[str, Any]) -> OptionItem:
        if value_field not in record:
            raise ValidationError(f"Record is missing '{value_field}'", field=value_field)
        label = record.get(label_field)
        return OptionItem(name=str(label if label is not None else record[value_field]),
                          value=record[value_field])
    return build


def _service_host(record: Dict[str, Any]) -> Dict[str, Any]:
    host = record.get('host')
    if isinstance(host, dict):
        return host
    hosts = record.get('hosts')
    if isinstance(hosts, list) and hosts and isinstance(hosts[0], dict):
        return hosts[0]
    if 'host_id' in record:
        return {'id': record['host_id'], 'name': record.get('host_name', '')}
    raise ValidationError(f"Service record {record.get('id')!r} has no host")


def service_option(record: Dict[str, Any]) -> OptionItem:
    """服务选项：值为 (主机ID, 服务ID) 的编码"""
    host = _service_host(record)
    if 'id' not in record or 'id' not in host:
        raise ValidationError("Service record is missing host or service id")
    label = f"{host.get('name', host['id'])} / {record.get('description') or record.get('name', record['id'])}"
    return OptionItem(name=label, value=identifier_codec.encode(host['id'], record['id']))


@dataclass(frozen=True)
class OptionSource:
    """具名选项来源"""
    endpoint: str
    build: Callable[[Dict[str, Any]], OptionItem]


OPTION_SOURCES: Dict[str, OptionSource] = {
    'monitoringServers': OptionSource(endpoints.MONITORING_SERVERS, _simple_option('name', 'id')),
    'hosts': OptionSource(endpoints.HOSTS_MONITORING, _simple_option('name', 'id')),
    'hostTemplates': OptionSource(endpoints.HOST_TEMPLATES, _simple_option('name', 'id')),
    'hostGroups': OptionSource(endpoints.HOST_GROUPS, _simple_option('name', 'id')),
    'serviceTemplates': OptionSource(endpoints.SERVICE_TEMPLATES, _simple_option('name', 'id')),
    'services': OptionSource(endpoints.SERVICES_MONITORING, service_option),
}


class OptionsLoader:
    """下拉选项加载器

    每次调用独立认证一次，不与批处理共享令牌。
    """

    def __init__(self, config: BridgeConfig,
                 client_factory: Optional[Callable[..., CentreonHttpClient]] = None):
        """初始化加载器

        Args:
            config: 桥接层配置
            client_factory: HTTP客户端工厂，缺省为 CentreonHttpClient
        """
        self.config = config
        self._client_factory = client_factory or CentreonHttpClient

    def _new_client(self) -> CentreonHttpClient:
        return self._client_factory(
            self.config.credentials(),
            api_version=self.config.centreon.api_version,
            request_timeout=self.config.adapter.request_timeout,
        )

    async def load_options(self, endpoint: str, label_field: str = 'name',
                           value_field: str = 'id') -> List[Dict[str, Any]]:
        """加载任意列表端点的选项

        Args:
            endpoint: 列表端点
            label_field: 用作显示名的字段
            value_field: 用作值的字段

        Returns:
            List[Dict[str, Any]]: [{name, value}]，保持服务端顺序
        """
        return await self._load(endpoint, _simple_option(label_field, value_field))

    async def load(self, source_name: str) -> List[Dict[str, Any]]:
        """按名称加载选项

        Raises:
            OperationError: 未知的选项来源
        """
        source = OPTION_SOURCES.get(source_name)
        if source is None:
            raise OperationError('options', source_name)
        return await self._load(source.endpoint, source.build)

    async def _load(self, endpoint: str,
                    build: Callable[[Dict[str, Any]], OptionItem]) -> List[Dict[str, Any]]:
        credentials = self.config.credentials()
        async with self._new_client() as client:
            token = await Authenticator(client).authenticate(credentials)
            records = await fetch_all_pages(
                client, token, endpoint, self.config.adapter.page_size
            )

        options = [build(record).to_dict() for record in records]
        logger.info(f"Loaded {len(options)} options from {endpoint}")
        return options
