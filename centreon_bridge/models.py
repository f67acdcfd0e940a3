"""
桥接层数据模型定义

定义凭据、请求描述、宏、复合服务标识、停机窗口、分页游标
以及批处理结果等标准化数据模型。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Mapping, TYPE_CHECKING
from enum import Enum

from .exceptions import ValidationError

if TYPE_CHECKING:
    from .adapters.http_client import CentreonHttpClient


class Resource(Enum):
    """资源类型枚举"""
    HOST = "host"
    SERVICE = "service"
    MONITORING_SERVER = "monitoringServer"


class Operation(Enum):
    """操作类型枚举"""
    LIST = "list"
    ADD = "add"
    DELETE = "delete"
    ACKNOWLEDGE = "acknowledge"
    DOWNTIME = "downtime"
    APPLY_CONFIGURATION = "applyConfiguration"


class ResultStatus(Enum):
    """结果状态枚举"""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Credentials:
    """Centreon 凭据"""
    base_url: str
    username: str
    password: str
    ignore_ssl: bool = False

    @property
    def normalized_base_url(self) -> str:
        """去除末尾斜杠的基础URL"""
        return self.base_url.rstrip('/')

    def __repr__(self) -> str:
        return (f"Credentials(base_url={self.base_url!r}, username={self.username!r}, "
                f"password='***', ignore_ssl={self.ignore_ssl})")


@dataclass(frozen=True)
class RequestDescriptor:
    """单次请求描述"""
    method: str
    endpoint: str
    body: Optional[Mapping[str, Any]] = None
    params: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class MacroEntry:
    """主机/服务宏"""
    name: str
    value: str = ""
    is_password: bool = False
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MacroEntry':
        if not isinstance(data, Mapping):
            raise ValidationError("Each macro must be an object with a 'name'", field='macros')
        if not str(data.get('name') or '').strip():
            raise ValidationError("Macro 'name' is required", field='macros')
        is_password = data.get('isPassword', data.get('is_password', False))
        return cls(
            name=data.get('name', ''),
            value=data.get('value', ''),
            is_password=bool(is_password),
            description=data.get('description', ''),
        )

    def to_wire(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'value': self.value,
            'is_password': self.is_password,
            'description': self.description,
        }


@dataclass(frozen=True)
class ServiceIdentifier:
    """复合服务标识 (主机ID, 服务ID)"""
    host_id: int
    service_id: int


@dataclass(frozen=True)
class DowntimeWindow:
    """停机窗口

    start_time/end_time 为规范化后的 UTC 时间字符串，
    由 operations 层在构造前完成顺序校验。
    """
    comment: str
    start_time: str
    end_time: str
    fixed: bool = True
    duration: int = 3600
    with_services: bool = False


@dataclass
class PaginationCursor:
    """分页游标"""
    limit: int
    page: int = 1
    total: Optional[int] = None

    def update(self, meta: Optional[Mapping[str, Any]]) -> bool:
        """读取分页元数据，返回是否还有下一页

        缺少元数据或 total 无法解析时视为单页。
        """
        if not isinstance(meta, Mapping):
            return False
        try:
            self.total = int(meta['total'])
        except (KeyError, TypeError, ValueError):
            return False
        return self.page * self.limit < self.total

    def advance(self) -> None:
        self.page += 1


@dataclass(frozen=True)
class OptionItem:
    """下拉选项"""
    name: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class ItemResult:
    """批处理单项结果"""
    index: int
    status: ResultStatus
    data: Any = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, index: int, data: Any) -> 'ItemResult':
        return cls(index=index, status=ResultStatus.SUCCESS, data=data)

    @classmethod
    def failure(cls, index: int, message: str) -> 'ItemResult':
        return cls(index=index, status=ResultStatus.ERROR, error=message)

    def to_dict(self) -> Dict[str, Any]:
        if self.is_success:
            return {'item': self.index, 'status': self.status.value, 'data': self.data}
        return {'item': self.index, 'status': self.status.value, 'error': self.error}


@dataclass(frozen=True)
class BulkTargetResult:
    """批量下发中单个目标的结果"""
    target: Any
    status: ResultStatus
    data: Any = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        if self.is_success:
            return {'target': self.target, 'status': self.status.value, 'data': self.data}
        return {'target': self.target, 'status': self.status.value, 'message': self.message}


@dataclass(frozen=True)
class ExecutionContext:
    """一次批处理的执行上下文

    令牌在批处理开始时写入一次，之后只读。
    """
    credentials: Credentials
    token: str
    client: 'CentreonHttpClient'
    default_list_limit: int = 50
    page_size: int = 100


@dataclass
class BatchItem:
    """批处理输入项"""
    resource: str
    operation: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BatchItem':
        if not isinstance(data, Mapping):
            raise ValidationError("Each item must be an object", field='items')
        parameters = data.get('parameters') or {}
        if not isinstance(parameters, Mapping):
            raise ValidationError("Item 'parameters' must be an object", field='parameters')
        return cls(
            resource=str(data.get('resource', '')),
            operation=str(data.get('operation', '')),
            parameters=dict(parameters),
        )


def transform_macros(macros: Optional[List[Mapping[str, Any]]]) -> List[Dict[str, Any]]:
    """将宏列表逐项转换为 API 格式，保持顺序，不去重"""
    return [MacroEntry.from_dict(macro).to_wire() for macro in (macros or [])]
