"""
测试配置和夹具

提供模拟 Centreon API 服务和测试配置。
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Set

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from centreon_bridge.config import BridgeConfig


class FakeCentreon:
    """模拟 Centreon Web API v2

    记录每次调用，支持分页、检索过滤以及按路径注入失败或延迟。
    """

    def __init__(self):
        self.token = "tok-123"
        self.username = "admin"
        self.password = "secret"
        self.base_url = ""
        self.login_count = 0
        self.calls: List[Dict[str, Any]] = []
        self.fail_paths: Set[str] = set()
        self.delays: Dict[str, float] = {}
        self.login_response: Optional[Dict[str, Any]] = None
        self.omit_meta = False
        self.reported_total: Optional[int] = None

        self.hosts = [{"id": i, "name": f"host-{i:03d}"} for i in range(1, 24)]
        self.services = [
            {"id": 10 + i, "description": f"svc-{i}", "host": {"id": 1 + i % 3, "name": f"host-{1 + i % 3:03d}"}}
            for i in range(5)
        ]
        self.monitoring_servers = [{"id": 1, "name": "Central"}, {"id": 2, "name": "Poller-1"}]
        self.host_templates = [{"id": 3, "name": "generic-host"}]
        self.host_groups = [{"id": 7, "name": "linux-servers"}]
        self.service_templates = [{"id": 4, "name": "generic-service"}]

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/api/{version}/{tail:.*}", self.handle)
        return app

    def calls_to(self, path: str, method: Optional[str] = None) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["path"] == path and (method is None or c["method"] == method)]

    async def handle(self, request: web.Request) -> web.Response:
        path = "/" + request.match_info["tail"]
        body = None
        if request.can_read_body:
            body = await request.json()
        call = {
            "method": request.method,
            "path": path,
            "version": request.match_info["version"],
            "query": dict(request.query),
            "body": body,
            "token": request.headers.get("X-AUTH-TOKEN"),
            "content_type": request.headers.get("Content-Type"),
        }
        self.calls.append(call)

        if path == "/login":
            return self._login(body)

        if call["token"] != self.token:
            return web.json_response({"code": 401, "message": "Invalid token"}, status=401)

        if path in self.delays:
            await asyncio.sleep(self.delays[path])

        if path in self.fail_paths:
            return web.json_response({"code": 500, "message": f"Failure on {path}"}, status=500)

        listings = {
            "/monitoring/hosts": (self.hosts, "host.name"),
            "/monitoring/services": (self.services, "service.description"),
            "/configuration/monitoring-servers": (self.monitoring_servers, "name"),
            "/configuration/hosts/templates": (self.host_templates, "name"),
            "/configuration/hosts/groups": (self.host_groups, "name"),
            "/configuration/services/templates": (self.service_templates, "name"),
        }
        if request.method == "GET" and path in listings:
            records, field = listings[path]
            return self._listing(records, field, request.query)

        if request.method == "POST" and path == "/configuration/hosts":
            return web.json_response({"id": 100, "name": body["name"]}, status=201)
        if request.method == "POST" and path == "/configuration/services":
            return web.json_response({"id": 200, "name": body["name"]}, status=201)
        if request.method in ("POST", "DELETE"):
            return web.Response(status=204)

        return web.json_response({"code": 404, "message": "Not found"}, status=404)

    def _login(self, body: Dict[str, Any]) -> web.Response:
        self.login_count += 1
        if self.login_response is not None:
            return web.json_response(self.login_response)
        credentials = body["security"]["credentials"]
        if credentials["login"] != self.username or credentials["password"] != self.password:
            return web.json_response({"code": 401, "message": "Invalid credentials"}, status=401)
        return web.json_response({
            "contact": {"id": 1, "alias": self.username},
            "security": {"token": self.token},
        })

    def _listing(self, records, field, query) -> web.Response:
        if "search" in query:
            condition = json.loads(query["search"])["$and"][0][field]
            key = field.split(".")[-1]
            if key == "description":
                value_of = lambda r: r["description"]
            else:
                value_of = lambda r: r["name"]
            if "$eq" in condition:
                records = [r for r in records if value_of(r) == condition["$eq"]]
            else:
                needle = condition["$lk"].strip("%")
                records = [r for r in records if needle in value_of(r)]

        page = int(query.get("page", 1))
        limit = int(query.get("limit", 10))
        start = (page - 1) * limit
        payload: Dict[str, Any] = {"result": records[start:start + limit]}
        if not self.omit_meta:
            total = self.reported_total if self.reported_total is not None else len(records)
            payload["meta"] = {"page": page, "limit": limit, "search": {}, "sort_by": {}, "total": total}
        return web.json_response(payload)


@pytest_asyncio.fixture
async def centreon():
    """运行中的模拟 Centreon 服务"""
    fake = FakeCentreon()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = f"http://{server.host}:{server.port}/"
    yield fake
    await server.close()


@pytest.fixture
def bridge_config(monkeypatch, centreon) -> BridgeConfig:
    """指向模拟服务的测试配置"""
    for var in ("CENTREON_BASE_URL", "CENTREON_USERNAME", "CENTREON_PASSWORD",
                "CENTREON_IGNORE_SSL", "CENTREON_API_VERSION", "BRIDGE_PAGE_SIZE",
                "BRIDGE_LIST_LIMIT", "BRIDGE_REQUEST_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)

    config = BridgeConfig(environment="testing")
    config.set("centreon.base_url", centreon.base_url)
    config.set("centreon.username", centreon.username)
    config.set("centreon.password", centreon.password)
    config.set("adapter.page_size", 10)
    return config


def pytest_collection_modifyitems(config, items):
    """根据文件路径添加标记"""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
