"""Turn connection and permission test results into displayable messages."""

from __future__ import annotations

from objectfs.store.object_client import ObjectClient, Severity

CONNECTION_SUCCESS = "Could establish connection to the external object storage."
CONNECTION_FAILURE = "Could not establish connection to the external object storage. "


def render(client: ObjectClient, test_delete: bool = True) -> list[tuple[str, Severity]]:
    report: list[tuple[str, Severity]] = []
    connection = client.test_connection()
    if not connection.success:
        report.append((CONNECTION_FAILURE + connection.details, Severity.ERROR))
        return report

    report.append((CONNECTION_SUCCESS, Severity.SUCCESS))
    # a successful permission check with no messages adds nothing
    permissions = client.test_permissions(test_delete)
    for message, severity in permissions.messages.items():
        report.append((message, Severity(severity)))
    return report


def format_report(report: list[tuple[str, Severity]]) -> list[str]:
    return [f"[{severity.value.upper()}] {message.strip()}" for message, severity in report]
