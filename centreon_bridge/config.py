"""
桥接层配置管理模块

配置来源按优先级从低到高：内置默认值、config/bridge_{environment}.yaml、
显式指定的 YAML/JSON 文件、环境变量。
"""

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from .exceptions import ConfigurationException
from .models import Credentials

logger = logging.getLogger(__name__)


@dataclass
class CentreonConfig:
    """Centreon 连接配置"""
    base_url: str = "https://mon-centreon.local"
    username: str = "admin"
    password: str = ""
    ignore_ssl: bool = False
    api_version: str = "latest"  # 例如 latest, v24.10


@dataclass
class AdapterConfig:
    """请求适配配置"""
    page_size: int = 100  # 全量拉取时的每页条数
    default_list_limit: int = 50
    request_timeout: Optional[int] = None  # 秒，None 使用 aiohttp 默认值


@dataclass
class ServiceConfig:
    """HTTP 服务配置"""
    host: str = "0.0.0.0"
    port: int = 8090
    debug: bool = False


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = "INFO"
    file: str = "logs/centreon_bridge.log"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('true', '1', 'yes', 'on')


# 环境变量 -> (配置节, 键, 转换函数)
ENV_MAPPINGS: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    'CENTREON_BASE_URL': ('centreon', 'base_url', str),
    'CENTREON_USERNAME': ('centreon', 'username', str),
    'CENTREON_PASSWORD': ('centreon', 'password', str),
    'CENTREON_IGNORE_SSL': ('centreon', 'ignore_ssl', _parse_bool),
    'CENTREON_API_VERSION': ('centreon', 'api_version', str),
    'BRIDGE_PAGE_SIZE': ('adapter', 'page_size', int),
    'BRIDGE_LIST_LIMIT': ('adapter', 'default_list_limit', int),
    'BRIDGE_REQUEST_TIMEOUT': ('adapter', 'request_timeout', int),
    'BRIDGE_HOST': ('service', 'host', str),
    'BRIDGE_PORT': ('service', 'port', int),
    'BRIDGE_DEBUG': ('service', 'debug', _parse_bool),
    'LOG_LEVEL': ('logging', 'level', str),
    'LOG_FILE': ('logging', 'file', str),
}

SECRET_ENV_VARS = frozenset({'CENTREON_PASSWORD'})


class BridgeConfig:
    """桥接层主配置类"""

    SECTIONS = {
        'centreon': CentreonConfig,
        'adapter': AdapterConfig,
        'service': ServiceConfig,
        'logging': LoggingConfig,
    }

    def __init__(self, config_file: Optional[str] = None, environment: str = "development"):
        """初始化配置

        Args:
            config_file: 配置文件路径（.yaml/.yml/.json）
            environment: 环境名称，决定 config/bridge_{environment}.yaml
        """
        self.environment = environment
        self.config_file = config_file

        self.centreon = CentreonConfig()
        self.adapter = AdapterConfig()
        self.service = ServiceConfig()
        self.logging = LoggingConfig()

        self._config_data: Dict[str, Any] = {
            name: asdict(getattr(self, name)) for name in self.SECTIONS
        }

        env_file = Path("config") / f"bridge_{environment}.yaml"
        if env_file.exists():
            self._merge_config(self._config_data, self._read_file(env_file))
        if config_file:
            self._merge_config(self._config_data, self._read_file(Path(config_file)))
        self._apply_env_overrides()
        self._apply_config()

        logger.info(f"Bridge config initialized for environment: {environment}")

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        """读取配置文件，文件不存在或格式不支持时返回空配置"""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return {}

        suffix = path.suffix.lower()
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            elif suffix == '.json':
                data = json.load(f)
            else:
                logger.warning(f"Unsupported config file format: {path}")
                return {}

        logger.info(f"Loaded config from: {path}")
        return data or {}

    def _apply_env_overrides(self) -> None:
        for env_var, (section, key, convert) in ENV_MAPPINGS.items():
            raw = os.getenv(env_var)
            if raw is None:
                continue
            try:
                value = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {env_var}: {raw!r}")
                continue
            self._config_data.setdefault(section, {})[key] = value
            shown = '***' if env_var in SECRET_ENV_VARS else value
            logger.info(f"Applied env config: {env_var}={shown}")

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """递归合并，override 中的值覆盖 base"""
        for key, value in override.items():
            if isinstance(base.get(key), dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _apply_config(self) -> None:
        """把合并后的字典写回各配置节，未知键忽略"""
        for name in self.SECTIONS:
            section = getattr(self, name)
            for key, value in (self._config_data.get(name) or {}).items():
                if hasattr(section, key):
                    setattr(section, key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """按点号分隔的键读取配置，如 centreon.base_url"""
        value: Any = self._config_data
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def set(self, key: str, value: Any) -> None:
        """按点号分隔的键写入配置并立即生效"""
        *parents, leaf = key.split('.')
        target = self._config_data
        for part in parents:
            target = target.setdefault(part, {})
        target[leaf] = value
        self._apply_config()

    def credentials(self) -> Credentials:
        """构建 Centreon 凭据

        Raises:
            ConfigurationException: 缺少基础URL或用户名
        """
        for key in ('base_url', 'username'):
            if not getattr(self.centreon, key):
                raise ConfigurationException(f"centreon.{key}", "must be specified")
        return Credentials(
            base_url=self.centreon.base_url,
            username=self.centreon.username,
            password=self.centreon.password,
            ignore_ssl=bool(self.centreon.ignore_ssl),
        )

    def validate(self) -> bool:
        """校验配置，第一条失败的规则写入错误日志"""
        rules = [
            (str(self.centreon.base_url).startswith(('http://', 'https://')),
             "centreon.base_url must start with http:// or https://"),
            (bool(self.centreon.username), "centreon.username must be specified"),
            (bool(self.centreon.api_version), "centreon.api_version must be specified"),
            (isinstance(self.adapter.page_size, int) and self.adapter.page_size > 0,
             "adapter.page_size must be a positive integer"),
            (isinstance(self.adapter.default_list_limit, int) and self.adapter.default_list_limit > 0,
             "adapter.default_list_limit must be a positive integer"),
            (self.adapter.request_timeout is None or self.adapter.request_timeout > 0,
             "adapter.request_timeout must be positive"),
            (isinstance(self.service.port, int) and 1 <= self.service.port <= 65535,
             "service.port must be between 1 and 65535"),
        ]
        for passed, message in rules:
            if not passed:
                logger.error(f"Config validation failed: {message}")
                return False
        return True

    def to_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        data = json.loads(json.dumps(self._config_data))
        if mask_secrets and data.get('centreon', {}).get('password'):
            data['centreon']['password'] = '***'
        return data

    def save_to_file(self, file_path: str) -> None:
        """保存配置到文件，密码以掩码写出"""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.to_dict(mask_secrets=True)

        suffix = path.suffix.lower()
        if suffix not in ('.yaml', '.yml', '.json'):
            raise ConfigurationException(file_path, f"unsupported file format {suffix!r}")

        with open(path, 'w', encoding='utf-8') as f:
            if suffix == '.json':
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True)

        logger.info(f"Config saved to: {file_path}")
