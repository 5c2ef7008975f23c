from objectfs.store.diagnostics import CONNECTION_FAILURE, CONNECTION_SUCCESS, format_report, render
from objectfs.store.object_client import ConnectionResult, PermissionResult, Severity


def test_connection_failure_emits_single_error_and_skips_permissions(make_client):
    client = make_client(connection=ConnectionResult(success=False, details="timeout"))
    report = render(client, test_delete=True)
    assert len(report) == 1
    message, severity = report[0]
    assert severity is Severity.ERROR
    assert "timeout" in message
    assert message.startswith(CONNECTION_FAILURE)
    assert client.permission_calls == []


def test_success_emits_connection_then_permission_messages(make_client):
    client = make_client()
    report = render(client, test_delete=True)
    assert report == [
        (CONNECTION_SUCCESS, Severity.SUCCESS),
        ("Permissions check passed.", Severity.SUCCESS),
    ]
    assert client.permission_calls == [True]


def test_permission_failures_keep_order_and_severity(make_client):
    messages = {
        "Could not write object. AccessDenied": Severity.ERROR,
        "Could delete object.": Severity.WARNING,
    }
    client = make_client(permissions=PermissionResult(success=False, messages=messages))
    report = render(client, test_delete=True)
    assert report[1:] == list(messages.items())


def test_success_without_messages_adds_nothing(make_client):
    client = make_client(permissions=PermissionResult(success=True, messages={}))
    assert render(client, test_delete=False) == [(CONNECTION_SUCCESS, Severity.SUCCESS)]


def test_plain_string_severities_are_normalised(make_client):
    client = make_client(permissions=PermissionResult(success=False, messages={"Read denied": "error"}))
    assert render(client)[1] == ("Read denied", Severity.ERROR)


def test_format_report():
    lines = format_report([(CONNECTION_FAILURE + "timeout", Severity.ERROR), ("Checked.", Severity.INFO)])
    assert lines == [
        "[ERROR] Could not establish connection to the external object storage. timeout",
        "[INFO] Checked.",
    ]
