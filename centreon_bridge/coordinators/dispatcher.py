"""
操作分发器

按 (资源, 操作) 从静态处理表中选择处理函数，逐项顺序执行批处理，
每批只认证一次，并按批处理级 continue-on-fail 标志处理单项失败。
"""

import logging
from typing import Dict, List, Any, Iterable, Mapping, Optional, Callable, Union

from ..adapters.authenticator import Authenticator
from ..adapters.http_client import CentreonHttpClient
from ..config import BridgeConfig
from ..exceptions import BridgeException, OperationError, ValidationError
from ..models import BatchItem, ExecutionContext, ItemResult, Operation, Resource
from ..operations import HANDLERS, Handler, ItemParameters

logger = logging.getLogger(__name__)


def resolve_handler(resource: str, operation: str) -> Handler:
    """查找处理函数

    Raises:
        OperationError: 未识别的资源或操作组合
    """
    try:
        key = (Resource(resource), Operation(operation))
    except ValueError:
        raise OperationError(resource, operation)

    handler = HANDLERS.get(key)
    if handler is None:
        raise OperationError(resource, operation)
    return handler


class Dispatcher:
    """操作分发器

    批处理之间不共享状态；同一批内各项只共享一个会话令牌。
    """

    def __init__(self, config: BridgeConfig,
                 client_factory: Optional[Callable[..., CentreonHttpClient]] = None):
        """初始化分发器

        Args:
            config: 桥接层配置
            client_factory: HTTP客户端工厂，缺省为 CentreonHttpClient
        """
        self.config = config
        self._client_factory = client_factory or CentreonHttpClient

    async def dispatch(self, context: ExecutionContext, resource: str, operation: str,
                       parameters: Union[ItemParameters, Mapping[str, Any], None] = None) -> Any:
        """执行单项操作

        Returns:
            Any: 成功时的响应数据；失败时抛出异常
        """
        handler = resolve_handler(resource, operation)
        if not isinstance(parameters, ItemParameters):
            parameters = ItemParameters(parameters)
        logger.debug(f"Dispatching {resource}:{operation}")
        return await handler(context, parameters)

    async def execute(self, items: Iterable[Union[BatchItem, Mapping[str, Any]]],
                      continue_on_fail: bool = False) -> List[ItemResult]:
        """顺序执行一批输入项

        Args:
            items: 输入项
            continue_on_fail: 单项失败时记录错误结果并继续

        Returns:
            List[ItemResult]: 按输入顺序的结果

        Raises:
            ValidationError: 参数校验失败，任何情况下都不吸收
            BridgeException: 未设置 continue_on_fail 时的第一个失败
        """
        batch = [item if isinstance(item, BatchItem) else BatchItem.from_dict(item) for item in items]
        credentials = self.config.credentials()

        async with self._client_factory(
            credentials,
            api_version=self.config.centreon.api_version,
            request_timeout=self.config.adapter.request_timeout,
        ) as client:
            token = await Authenticator(client).authenticate(credentials)
            context = ExecutionContext(
                credentials=credentials,
                token=token,
                client=client,
                default_list_limit=self.config.adapter.default_list_limit,
                page_size=self.config.adapter.page_size,
            )

            results: List[ItemResult] = []
            for index, item in enumerate(batch):
                try:
                    data = await self.dispatch(context, item.resource, item.operation, item.parameters)
                except ValidationError:
                    raise
                except BridgeException as e:
                    if not continue_on_fail:
                        logger.error(f"Item {index} ({item.resource}:{item.operation}) failed, aborting batch: {e.message}")
                        raise
                    logger.warning(f"Item {index} ({item.resource}:{item.operation}) failed: {e.message}")
                    results.append(ItemResult.failure(index, e.message))
                    continue

                results.append(ItemResult.success(index, data))

            logger.info(
                f"Batch finished: {sum(1 for r in results if r.is_success)}/{len(batch)} succeeded, "
                f"{client.get_statistics()['request_count']} requests"
            )
            return results

    @staticmethod
    def summarize(results: List[ItemResult]) -> Dict[str, Any]:
        """结果汇总"""
        succeeded = sum(1 for r in results if r.is_success)
        return {
            'results': [r.to_dict() for r in results],
            'succeeded': succeeded,
            'failed': len(results) - succeeded,
        }
