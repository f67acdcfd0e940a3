"""
Centreon 工作流桥接模块

为工作流引擎提供 Centreon Web REST API 操作：主机/服务增删查、
告警确认、停机计划以及监控服务器配置重载。

为避免在包导入阶段引入 aiohttp 等依赖，此文件不进行子模块的聚合导入。
请从对应子模块中显式导入所需组件，例如：
- from centreon_bridge.config import BridgeConfig
- from centreon_bridge.coordinators.dispatcher import Dispatcher
- from centreon_bridge.loaders.options_loader import OptionsLoader
"""

__version__ = "1.0.0"

__all__: list[str] = []
