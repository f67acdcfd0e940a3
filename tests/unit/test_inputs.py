import pytest

from centreon_bridge.exceptions import IdentifierDecodeError, ValidationError
from centreon_bridge.models import ServiceIdentifier
from centreon_bridge.operations.inputs import (
    AcknowledgeInput, ApplyConfigurationInput, DowntimeInput, HostAddInput,
    ItemParameters, ListInput, ServiceAddInput, ServiceTargetInput
)


def test_list_input_defaults():
    data = ListInput.from_params(ItemParameters({}))
    assert data == ListInput(name_filter="", exact_match=False, limit=None, return_all=False)


def test_list_input_parses_string_values():
    data = ListInput.from_params(ItemParameters({
        "name_filter": " web ", "exact_match": "true", "limit": "25", "return_all": "1",
    }))
    assert data.name_filter == "web"
    assert data.exact_match is True
    assert data.limit == 25
    assert data.return_all is True


@pytest.mark.parametrize("limit", [0, -5, "abc"])
def test_list_input_rejects_bad_limit(limit):
    with pytest.raises(ValidationError):
        ListInput.from_params(ItemParameters({"limit": limit}))


def test_bool_parameter_rejects_garbage():
    with pytest.raises(ValidationError) as exc_info:
        ItemParameters({"notify": "maybe"}).get_bool("notify")
    assert exc_info.value.field == "notify"


def test_int_parameter_rejects_bool():
    with pytest.raises(ValidationError):
        ItemParameters({"host_id": True}).require_int("host_id")


def test_host_add_input_requires_name_address_and_server():
    with pytest.raises(ValidationError) as exc_info:
        HostAddInput.from_params(ItemParameters({"address": "10.0.0.1", "monitoring_server_id": 1}))
    assert exc_info.value.field == "name"


def test_host_add_input_accepts_comma_separated_ids():
    data = HostAddInput.from_params(ItemParameters({
        "name": "web-01", "address": "10.0.0.1", "monitoring_server_id": "1",
        "templates": "3, 4", "groups": [7],
    }))
    assert data.templates == [3, 4]
    assert data.groups == [7]
    assert data.macros == []
    assert data.alias == ""


def test_service_add_input_optional_template():
    data = ServiceAddInput.from_params(ItemParameters({"name": "cpu", "host_id": 5}))
    assert data.service_template_id is None


def test_service_add_input_rejects_non_list_macros():
    with pytest.raises(ValidationError):
        ServiceAddInput.from_params(ItemParameters({"name": "cpu", "host_id": 5, "macros": "PORT=1"}))


@pytest.mark.parametrize("macros", [["PORT=80"], [{"value": "80"}], [{"name": " ", "value": "80"}]])
def test_host_add_input_rejects_malformed_macro_entries(macros):
    with pytest.raises(ValidationError) as exc_info:
        HostAddInput.from_params(ItemParameters({
            "name": "web-01", "address": "10.0.0.1", "monitoring_server_id": 1, "macros": macros,
        }))
    assert exc_info.value.field == "macros"


def test_service_add_input_keeps_macros_in_order():
    data = ServiceAddInput.from_params(ItemParameters({
        "name": "cpu", "host_id": 5,
        "macros": [{"name": "WARN", "value": "80"}, {"name": "CRIT", "value": "90"}],
    }))
    assert [m["name"] for m in data.macros] == ["WARN", "CRIT"]


def test_service_target_from_encoded_identifier():
    data = ServiceTargetInput.from_params(ItemParameters({"service": '{"host_id":1,"service_id":2}'}))
    assert data.identifier == ServiceIdentifier(1, 2)


def test_service_target_from_explicit_ids():
    data = ServiceTargetInput.from_params(ItemParameters({"host_id": "3", "service_id": 4}))
    assert data.identifier == ServiceIdentifier(3, 4)


def test_service_target_malformed_identifier():
    with pytest.raises(IdentifierDecodeError):
        ServiceTargetInput.from_params(ItemParameters({"service": "3:4"}))


def test_acknowledge_input_defaults():
    data = AcknowledgeInput.from_params(ItemParameters({"comment": "on it"}))
    assert data == AcknowledgeInput(comment="on it", notify=False, sticky=True,
                                    persistent=True, with_services=False)


def test_acknowledge_input_requires_comment():
    with pytest.raises(ValidationError):
        AcknowledgeInput.from_params(ItemParameters({"comment": "  "}))


def test_downtime_input_normalizes_window():
    data = DowntimeInput.from_params(ItemParameters({
        "comment": "patching",
        "start_time": "2024-01-01 10:00:00",
        "end_time": "2024-01-01T13:00:00+02:00",
    }))
    assert data.window.start_time == "2024-01-01T10:00:00Z"
    assert data.window.end_time == "2024-01-01T11:00:00Z"
    assert data.window.fixed is True
    assert data.window.duration == 3600
    assert data.window.with_services is False


def test_downtime_input_rejects_reversed_window():
    with pytest.raises(ValidationError, match="Start time must be before end time"):
        DowntimeInput.from_params(ItemParameters({
            "comment": "patching",
            "start_time": "2024-01-01T11:00:00Z",
            "end_time": "2024-01-01T10:00:00Z",
        }))


def test_downtime_input_rejects_non_positive_duration():
    with pytest.raises(ValidationError):
        DowntimeInput.from_params(ItemParameters({
            "comment": "patching",
            "start_time": "2024-01-01T10:00:00Z",
            "end_time": "2024-01-01T11:00:00Z",
            "duration": 0,
        }))


def test_apply_configuration_input():
    data = ApplyConfigurationInput.from_params(ItemParameters({"server_ids": "10,20,30"}))
    assert data.server_ids == [10, 20, 30]
    assert data.continue_on_fail is False
