"""
CSV rendering for the admin export endpoints.
"""
import csv
import datetime as dt
import io
from typing import Any, Iterable, Mapping, Sequence, Tuple

# (row key, CSV header)
USER_COLUMNS: Sequence[Tuple[str, str]] = (
    ("id", "ID"),
    ("email", "Email"),
    ("full_name", "Full Name"),
    ("phone_number", "Phone Number"),
    ("company_name", "Company"),
    ("created_at", "Registration Date"),
    ("last_login", "Last Login"),
    ("total_connections", "Total Connections"),
    ("last_connection", "Last Connection"),
)

CONNECTION_COLUMNS: Sequence[Tuple[str, str]] = (
    ("id", "ID"),
    ("email", "Email"),
    ("full_name", "Full Name"),
    ("company_name", "Company"),
    ("connection_time", "Connection Time"),
    ("ip_address", "IP Address"),
    ("session_duration", "Session Duration (minutes)"),
    ("status", "Status"),
)


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    if hasattr(value, "value"):  # Enum members
        return value.value
    return value


def render_csv(columns: Sequence[Tuple[str, str]], rows: Iterable[Mapping[str, Any]]) -> bytes:
    """Render rows to UTF-8 CSV bytes with a header line"""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow([title for _, title in columns])
    for row in rows:
        writer.writerow([_cell(row.get(key)) for key, _ in columns])
    return buf.getvalue().encode("utf-8")
