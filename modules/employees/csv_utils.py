# modules/employees/csv_utils.py
from __future__ import annotations
from typing import Dict, List, Optional
import csv, io, re

REQUIRED_COLUMNS = ["name", "email", "position", "department"]
TEMPLATE_SAMPLE = ["John Doe", "john.doe@example.com", "Developer", "Engineering"]

_email_rx = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and bool(_email_rx.match(email))


# ---------- CSV parsing ----------
def parse_csv(text: str, headers: Optional[List[str]] = None) -> List[Dict[str, str]]:
    """
    Rows as dicts keyed by header. Blank lines are skipped; the first row is
    the header row unless headers are given; missing cells become "".
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8-sig", errors="ignore")
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    reader = csv.reader(io.StringIO("\n".join(lines)), skipinitialspace=True)
    records = [[cell.strip() for cell in row] for row in reader]

    if headers is None:
        headers, records = [h.strip() for h in records[0]], records[1:]

    rows: List[Dict[str, str]] = []
    for values in records:
        rows.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return rows


def validate_employee_data(rows: List[Dict[str, str]]) -> List[str]:
    """One message per problem, numbered from Row 1"""
    errors: List[str] = []
    seen = set()

    for num, row in enumerate(rows, 1):
        if not (row.get("name") or "").strip():
            errors.append(f"Row {num}: Name is required")

        email = (row.get("email") or "").strip()
        if not email:
            errors.append(f"Row {num}: Email is required")
        elif not is_valid_email(email):
            errors.append(f"Row {num}: Invalid email format")
        elif email in seen:
            errors.append(f"Row {num}: Duplicate email '{email}'")
        else:
            seen.add(email)

        if not (row.get("position") or "").strip():
            errors.append(f"Row {num}: Position is required")
        if not (row.get("department") or "").strip():
            errors.append(f"Row {num}: Department is required")

    return errors


def employee_csv_template() -> str:
    return ",".join(REQUIRED_COLUMNS) + "\n" + ",".join(TEMPLATE_SAMPLE)
