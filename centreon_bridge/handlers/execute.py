"""
批处理执行处理器
"""

from aiohttp import web

from .base import BaseHandler
from ..coordinators.dispatcher import Dispatcher
from ..exceptions import BridgeException
from ..operations.inputs import ItemParameters


class ExecuteHandler(BaseHandler):
    """批处理执行处理器"""

    async def execute(self, request: web.Request) -> web.Response:
        """执行一批 Centreon 操作

        请求体: {"items": [{"resource", "operation", "parameters"}], "continue_on_fail": bool}

        Args:
            request: HTTP请求对象

        Returns:
            web.Response: 每项一个结果，按输入顺序
        """
        payload = await self.get_request_json(request)
        items = payload.get('items') if isinstance(payload, dict) else None
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            return self.error_response("'items' must be a list of objects", 400, 'VALIDATION_ERROR')

        dispatcher: Dispatcher = request.app['dispatcher']

        try:
            continue_on_fail = ItemParameters(payload).get_bool('continue_on_fail', False)
            results = await dispatcher.execute(items, continue_on_fail=continue_on_fail)
        except BridgeException as e:
            self.logger.error(f"Batch aborted: {e.message}")
            return self.bridge_error_response(e)

        return self.success_response(Dispatcher.summarize(results), "批处理完成")
