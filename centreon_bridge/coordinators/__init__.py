"""
协调器模块

包含操作分发器和批量下发聚合器。
"""

# 操作层依赖 bulk_aggregator，此处不聚合导入以免循环导入。
# 请从具体模块路径导入，例如：
# from centreon_bridge.coordinators.dispatcher import Dispatcher
__all__: list[str] = []
