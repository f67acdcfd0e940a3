"""
批量下发聚合器

一个逻辑操作针对多个远端目标时逐个发起请求，
按目标记录成功/失败，并按内层 continue-on-fail 标志决定是否继续。
"""

import logging
from typing import Dict, List, Any, Callable, Sequence

from ..exceptions import ApiRequestError, ValidationError
from ..models import BulkTargetResult, ExecutionContext, RequestDescriptor, ResultStatus

logger = logging.getLogger(__name__)


class BulkAggregator:
    """批量下发聚合器

    内层 continue_on_fail 与批处理外层标志相互独立。
    """

    def __init__(self, context: ExecutionContext):
        self.context = context

    async def apply_to_many(self, target_ids: Sequence[Any],
                            build_descriptor: Callable[[Any], RequestDescriptor],
                            continue_on_fail: bool = False) -> Dict[str, Any]:
        """对每个目标发起一次请求

        Args:
            target_ids: 目标ID列表
            build_descriptor: 根据目标ID构造请求描述
            continue_on_fail: 单个目标失败后是否继续其余目标

        Returns:
            Dict[str, Any]: {'results': [每个目标的结果]}

        Raises:
            ValidationError: 目标列表为空
            ApiRequestError: 未设置 continue_on_fail 时的第一个失败，
                已处理目标的结果附在 details['partial_results']
        """
        if not target_ids:
            raise ValidationError("At least one target is required", field='server_ids')

        results: List[BulkTargetResult] = []

        for target in target_ids:
            descriptor = build_descriptor(target)
            try:
                response = await self.context.client.request(self.context.token, descriptor)
            except ApiRequestError as e:
                logger.warning(f"Bulk target {target} failed: {e.message}")
                results.append(BulkTargetResult(
                    target=target, status=ResultStatus.ERROR, message=e.message
                ))
                if not continue_on_fail:
                    e.details['partial_results'] = [r.to_dict() for r in results]
                    raise
                continue

            results.append(BulkTargetResult(
                target=target, status=ResultStatus.SUCCESS, data=response or {'success': True}
            ))

        failed = sum(1 for r in results if not r.is_success)
        logger.info(f"Bulk apply finished: {len(results) - failed} succeeded, {failed} failed")
        return {'results': [r.to_dict() for r in results]}
