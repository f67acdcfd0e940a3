"""
操作输入契约

每个操作对应一个显式的输入数据类，所有可选参数都有明确默认值，
由单项参数访问器解析并在发起任何请求前完成校验。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Mapping

from ..exceptions import ValidationError
from ..models import DowntimeWindow, MacroEntry, ServiceIdentifier
from ..utils import identifier_codec
from ..utils.time_utils import to_canonical_instant, validate_order

_TRUE_VALUES = ('true', '1', 'yes', 'on')
_FALSE_VALUES = ('false', '0', 'no', 'off', '')


class ItemParameters:
    """单项参数访问器"""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str, default: Any = None) -> Any:
        value = self._values.get(name)
        return default if value is None else value

    def require(self, name: str) -> Any:
        value = self._values.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"Parameter '{name}' is required", field=name)
        return value

    def get_str(self, name: str, default: str = '') -> str:
        return str(self.get(name, default)).strip()

    def require_str(self, name: str) -> str:
        return str(self.require(name)).strip()

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get(name, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        text = str(value).strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
        raise ValidationError(f"Parameter '{name}' must be a boolean", field=name)

    def get_int(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self.get(name)
        if value is None or value == '':
            return default
        return _to_int(value, name)

    def require_int(self, name: str) -> int:
        return _to_int(self.require(name), name)

    def get_int_list(self, name: str) -> List[int]:
        value = self.get(name, [])
        if isinstance(value, str):
            value = [part for part in value.split(',') if part.strip()]
        elif not isinstance(value, (list, tuple)):
            value = [value]
        return [_to_int(item, name) for item in value]

    def get_list(self, name: str) -> List[Any]:
        value = self.get(name, [])
        if not isinstance(value, (list, tuple)):
            raise ValidationError(f"Parameter '{name}' must be a list", field=name)
        return list(value)


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Parameter '{name}' must be an integer", field=name)
    try:
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Parameter '{name}' must be an integer", field=name)


def _macro_list(params: ItemParameters) -> List[Dict[str, Any]]:
    """宏列表，每项必须是带 name 的对象"""
    macros = params.get_list('macros')
    for macro in macros:
        MacroEntry.from_dict(macro)
    return [dict(macro) for macro in macros]


@dataclass(frozen=True)
class ListInput:
    """列表查询输入"""
    name_filter: str = ''
    exact_match: bool = False
    limit: Optional[int] = None  # None 使用配置中的默认条数
    return_all: bool = False

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'ListInput':
        limit = params.get_int('limit')
        if limit is not None and limit <= 0:
            raise ValidationError("Parameter 'limit' must be positive", field='limit')
        return cls(
            name_filter=params.get_str('name_filter'),
            exact_match=params.get_bool('exact_match', False),
            limit=limit,
            return_all=params.get_bool('return_all', False),
        )


@dataclass(frozen=True)
class HostAddInput:
    """主机创建输入"""
    name: str
    address: str
    monitoring_server_id: int
    alias: str = ''
    templates: List[int] = field(default_factory=list)
    groups: List[int] = field(default_factory=list)
    macros: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'HostAddInput':
        return cls(
            name=params.require_str('name'),
            address=params.require_str('address'),
            monitoring_server_id=params.require_int('monitoring_server_id'),
            alias=params.get_str('alias'),
            templates=params.get_int_list('templates'),
            groups=params.get_int_list('groups'),
            macros=_macro_list(params),
        )


@dataclass(frozen=True)
class ServiceAddInput:
    """服务创建输入"""
    name: str
    host_id: int
    service_template_id: Optional[int] = None
    macros: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'ServiceAddInput':
        return cls(
            name=params.require_str('name'),
            host_id=params.require_int('host_id'),
            service_template_id=params.get_int('service_template_id'),
            macros=_macro_list(params),
        )


@dataclass(frozen=True)
class HostTargetInput:
    host_id: int

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'HostTargetInput':
        return cls(host_id=params.require_int('host_id'))


@dataclass(frozen=True)
class ServiceTargetInput:
    """服务目标：编码后的 service 标识，或显式的 host_id + service_id"""
    identifier: ServiceIdentifier

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'ServiceTargetInput':
        if params.get('service') not in (None, ''):
            return cls(identifier=identifier_codec.decode(params.get('service')))
        return cls(identifier=ServiceIdentifier(
            host_id=params.require_int('host_id'),
            service_id=params.require_int('service_id'),
        ))


@dataclass(frozen=True)
class AcknowledgeInput:
    """确认输入"""
    comment: str
    notify: bool = False
    sticky: bool = True
    persistent: bool = True
    with_services: bool = False

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'AcknowledgeInput':
        return cls(
            comment=params.require_str('comment'),
            notify=params.get_bool('notify', False),
            sticky=params.get_bool('sticky', True),
            persistent=params.get_bool('persistent', True),
            with_services=params.get_bool('with_services', False),
        )


@dataclass(frozen=True)
class DowntimeInput:
    """停机输入，构造时完成时间规范化与顺序校验"""
    window: DowntimeWindow

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'DowntimeInput':
        comment = params.require_str('comment')
        start_time = to_canonical_instant(params.require('start_time'), 'start_time')
        end_time = to_canonical_instant(params.require('end_time'), 'end_time')
        validate_order(start_time, end_time)

        duration = params.get_int('duration', 3600)
        if duration <= 0:
            raise ValidationError("Parameter 'duration' must be positive", field='duration')

        return cls(window=DowntimeWindow(
            comment=comment,
            start_time=start_time,
            end_time=end_time,
            fixed=params.get_bool('fixed', True),
            duration=duration,
            with_services=params.get_bool('with_services', False),
        ))


@dataclass(frozen=True)
class ApplyConfigurationInput:
    """批量生成并重载配置输入"""
    server_ids: List[int] = field(default_factory=list)
    continue_on_fail: bool = False

    @classmethod
    def from_params(cls, params: ItemParameters) -> 'ApplyConfigurationInput':
        return cls(
            server_ids=params.get_int_list('server_ids'),
            continue_on_fail=params.get_bool('continue_on_fail', False),
        )
