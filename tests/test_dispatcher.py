import json

import pytest

from centreon_bridge.coordinators.dispatcher import Dispatcher, resolve_handler
from centreon_bridge.exceptions import (
    ApiRequestError, AuthenticationError, OperationError, ValidationError
)
from centreon_bridge.models import ResultStatus
from centreon_bridge.operations import HANDLERS


def _statuses(results):
    return [r.status for r in results]


def test_handler_table_covers_all_operations():
    assert len(HANDLERS) == 12
    assert resolve_handler("monitoringServer", "applyConfiguration") is not None


@pytest.mark.parametrize("resource, operation", [
    ("host", "reboot"),
    ("contact", "list"),
    ("monitoringServer", "delete"),
])
def test_unknown_combination_raises_operation_error(resource, operation):
    with pytest.raises(OperationError) as exc_info:
        resolve_handler(resource, operation)
    assert exc_info.value.message == f'The operation "{operation}" is not known for resource "{resource}"'


@pytest.mark.asyncio
async def test_batch_authenticates_once(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "host", "operation": "list"},
        {"resource": "host", "operation": "acknowledge", "parameters": {"host_id": 1, "comment": "ack"}},
        {"resource": "monitoringServer", "operation": "list"},
    ])

    assert _statuses(results) == [ResultStatus.SUCCESS] * 3
    assert centreon.login_count == 1
    assert all(c["token"] == "tok-123" for c in centreon.calls if c["path"] != "/login")


@pytest.mark.asyncio
async def test_empty_batch_still_authenticates(bridge_config, centreon):
    assert await Dispatcher(bridge_config).execute([]) == []
    assert centreon.login_count == 1


@pytest.mark.asyncio
async def test_failure_aborts_batch_without_continue(bridge_config, centreon):
    centreon.fail_paths.add("/configuration/hosts/5")
    items = [
        {"resource": "host", "operation": "list"},
        {"resource": "host", "operation": "delete", "parameters": {"host_id": 5}},
        {"resource": "host", "operation": "list"},
    ]

    with pytest.raises(ApiRequestError):
        await Dispatcher(bridge_config).execute(items)

    assert len(centreon.calls_to("/monitoring/hosts")) == 1


@pytest.mark.asyncio
async def test_continue_on_fail_records_error_and_proceeds(bridge_config, centreon):
    centreon.fail_paths.add("/configuration/hosts/5")
    items = [
        {"resource": "host", "operation": "list"},
        {"resource": "host", "operation": "delete", "parameters": {"host_id": 5}},
        {"resource": "host", "operation": "list"},
    ]

    results = await Dispatcher(bridge_config).execute(items, continue_on_fail=True)

    assert _statuses(results) == [ResultStatus.SUCCESS, ResultStatus.ERROR, ResultStatus.SUCCESS]
    assert [r.index for r in results] == [0, 1, 2]
    assert "DELETE /configuration/hosts/5 failed" in results[1].error
    summary = Dispatcher.summarize(results)
    assert summary["succeeded"] == 2
    assert summary["failed"] == 1


@pytest.mark.asyncio
async def test_validation_error_is_never_absorbed(bridge_config, centreon):
    items = [
        {"resource": "host", "operation": "list"},
        {"resource": "host", "operation": "acknowledge", "parameters": {"host_id": 1}},
    ]

    with pytest.raises(ValidationError):
        await Dispatcher(bridge_config).execute(items, continue_on_fail=True)

    assert centreon.calls_to("/monitoring/hosts/1/acknowledgements") == []


@pytest.mark.asyncio
async def test_unknown_operation_under_continue_on_fail(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute(
        [{"resource": "host", "operation": "reboot"}, {"resource": "host", "operation": "list"}],
        continue_on_fail=True,
    )

    assert results[0].error == 'The operation "reboot" is not known for resource "host"'
    assert results[1].status == ResultStatus.SUCCESS


@pytest.mark.asyncio
async def test_unknown_operation_aborts_without_continue(bridge_config, centreon):
    with pytest.raises(OperationError):
        await Dispatcher(bridge_config).execute([{"resource": "host", "operation": "reboot"}])


@pytest.mark.asyncio
async def test_rejected_login_runs_no_items(bridge_config, centreon):
    bridge_config.set("centreon.password", "wrong")
    with pytest.raises(AuthenticationError):
        await Dispatcher(bridge_config).execute(
            [{"resource": "host", "operation": "list"}], continue_on_fail=True
        )
    assert [c["path"] for c in centreon.calls] == ["/login"]


@pytest.mark.asyncio
async def test_list_uses_default_limit_and_search(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "host", "operation": "list", "parameters": {"name_filter": "host-00"}},
    ])

    call = centreon.calls_to("/monitoring/hosts")[0]
    assert call["query"]["limit"] == "50"
    assert json.loads(call["query"]["search"]) == {"$and": [{"host.name": {"$lk": "%host-00%"}}]}
    assert len(results[0].data["result"]) == 9


@pytest.mark.asyncio
async def test_list_return_all_walks_pages(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "host", "operation": "list", "parameters": {"return_all": True}},
    ])

    data = results[0].data
    assert len(data["result"]) == 23
    assert data["meta"] == {"total": 23}
    assert len(centreon.calls_to("/monitoring/hosts")) == 3


@pytest.mark.asyncio
async def test_service_list_exact_match(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "service", "operation": "list",
         "parameters": {"name_filter": "svc-3", "exact_match": True, "limit": 5}},
    ])

    assert [s["id"] for s in results[0].data["result"]] == [13]
    assert centreon.calls_to("/monitoring/services")[0]["query"]["limit"] == "5"


@pytest.mark.asyncio
async def test_add_host_returns_created_record(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([{
        "resource": "host", "operation": "add",
        "parameters": {
            "name": "web-01", "address": "10.0.0.5", "monitoring_server_id": 1,
            "templates": [3], "macros": [{"name": "PORT", "value": "80", "isPassword": False}],
        },
    }])

    assert results[0].data == {"id": 100, "name": "web-01"}
    body = centreon.calls_to("/configuration/hosts", "POST")[0]["body"]
    assert body["alias"] == "web-01"
    assert body["macros"] == [{"name": "PORT", "value": "80", "is_password": False, "description": ""}]


@pytest.mark.asyncio
async def test_delete_host_without_body_reports_success(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "host", "operation": "delete", "parameters": {"host_id": 5}},
    ])
    assert results[0].data == {"success": True, "host_id": 5}


@pytest.mark.asyncio
async def test_host_downtime_normalizes_times(bridge_config, centreon):
    await Dispatcher(bridge_config).execute([{
        "resource": "host", "operation": "downtime",
        "parameters": {
            "host_id": 2, "comment": "patching", "with_services": True,
            "start_time": "2024-01-01 10:00:00", "end_time": "2024-01-01T14:00:00+02:00",
        },
    }])

    body = centreon.calls_to("/monitoring/hosts/2/downtimes", "POST")[0]["body"]
    assert body == {
        "comment": "patching",
        "start_time": "2024-01-01T10:00:00Z",
        "end_time": "2024-01-01T12:00:00Z",
        "is_fixed": True,
        "duration": 3600,
        "with_services": True,
    }


@pytest.mark.asyncio
async def test_service_acknowledge_with_encoded_identifier(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([{
        "resource": "service", "operation": "acknowledge",
        "parameters": {"service": '{"host_id":1,"service_id":10}', "comment": "seen", "notify": True},
    }])

    assert results[0].data == {"success": True, "host_id": 1, "service_id": 10}
    body = centreon.calls_to("/monitoring/hosts/1/services/10/acknowledgements")[0]["body"]
    assert body == {
        "comment": "seen",
        "is_notify_contacts": True,
        "is_persistent_comment": True,
        "is_sticky": True,
    }


@pytest.mark.asyncio
async def test_service_downtime_and_delete(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([
        {"resource": "service", "operation": "downtime",
         "parameters": {"host_id": 1, "service_id": 10, "comment": "x",
                        "start_time": "2024-01-01T10:00:00Z", "end_time": "2024-01-01T10:30:00Z",
                        "fixed": False, "duration": 600}},
        {"resource": "service", "operation": "delete",
         "parameters": {"service": '{"host_id":1,"service_id":10}'}},
    ])

    body = centreon.calls_to("/monitoring/hosts/1/services/10/downtimes")[0]["body"]
    assert body["is_fixed"] is False
    assert body["duration"] == 600
    assert "with_services" not in body
    assert centreon.calls_to("/configuration/services/10", "DELETE")
    assert results[1].data == {"success": True, "service_id": 10}


@pytest.mark.asyncio
async def test_add_service(bridge_config, centreon):
    results = await Dispatcher(bridge_config).execute([{
        "resource": "service", "operation": "add",
        "parameters": {"name": "cpu", "host_id": 1, "service_template_id": 4},
    }])

    assert results[0].data == {"id": 200, "name": "cpu"}
    body = centreon.calls_to("/configuration/services", "POST")[0]["body"]
    assert body == {"name": "cpu", "host_id": 1, "macros": [], "service_template_id": 4}


@pytest.mark.asyncio
async def test_apply_configuration_inner_continue(bridge_config, centreon):
    centreon.fail_paths.add("/configuration/monitoring-servers/20/generate-and-reload")

    results = await Dispatcher(bridge_config).execute([{
        "resource": "monitoringServer", "operation": "applyConfiguration",
        "parameters": {"server_ids": [10, 20, 30], "continue_on_fail": True},
    }])

    targets = results[0].data["results"]
    assert [t["target"] for t in targets] == [10, 20, 30]
    assert [t["status"] for t in targets] == ["success", "error", "success"]


@pytest.mark.asyncio
async def test_apply_configuration_failure_without_inner_continue(bridge_config, centreon):
    centreon.fail_paths.add("/configuration/monitoring-servers/20/generate-and-reload")

    results = await Dispatcher(bridge_config).execute([{
        "resource": "monitoringServer", "operation": "applyConfiguration",
        "parameters": {"server_ids": [10, 20, 30]},
    }], continue_on_fail=True)

    assert results[0].status == ResultStatus.ERROR
    paths = [c["path"] for c in centreon.calls if c["path"].endswith("generate-and-reload")]
    assert paths == [
        "/configuration/monitoring-servers/10/generate-and-reload",
        "/configuration/monitoring-servers/20/generate-and-reload",
    ]


@pytest.mark.asyncio
async def test_timed_out_item_is_recorded_under_continue_on_fail(bridge_config, centreon):
    centreon.delays["/configuration/hosts/5"] = 1.0
    bridge_config.set("adapter.request_timeout", 0.2)

    results = await Dispatcher(bridge_config).execute([
        {"resource": "host", "operation": "delete", "parameters": {"host_id": 5}},
        {"resource": "host", "operation": "list"},
    ], continue_on_fail=True)

    assert _statuses(results) == [ResultStatus.ERROR, ResultStatus.SUCCESS]
    assert "request timed out" in results[0].error


@pytest.mark.asyncio
async def test_timed_out_server_is_recorded_by_inner_continue(bridge_config, centreon):
    centreon.delays["/configuration/monitoring-servers/20/generate-and-reload"] = 1.0
    bridge_config.set("adapter.request_timeout", 0.2)

    results = await Dispatcher(bridge_config).execute([{
        "resource": "monitoringServer", "operation": "applyConfiguration",
        "parameters": {"server_ids": [10, 20, 30], "continue_on_fail": True},
    }])

    targets = results[0].data["results"]
    assert [t["status"] for t in targets] == ["success", "error", "success"]
