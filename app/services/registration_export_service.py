"""CSV export of an event's registration grid."""
import csv
import io
import re
from datetime import date
from typing import Optional

from app.core.config import settings
from app.schemas.registration_data import RegistrationGrid

UTF8_BOM = "\ufeff"
LEADING_COLUMNS = ["Last Name", "First Name", "Phone", "Email"]
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]")


def export_filename(event_name: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    safe_name = UNSAFE_FILENAME_CHARS.sub("_", event_name or "")
    return f"{safe_name}_{settings.EXPORT_FILENAME_SUFFIX}_{today.strftime('%Y-%m-%d')}.csv"


def build_csv(grid: RegistrationGrid) -> bytes:
    """UTF-8 CSV with a byte-order mark, one row per participant, one column per field."""
    output = io.StringIO()
    output.write(UTF8_BOM)
    writer = csv.writer(output)

    writer.writerow(LEADING_COLUMNS + [field.name for field in grid.fields])
    for participant in grid.participants:
        row = [participant.last_name, participant.first_name, participant.phone, participant.email]
        row += [participant.field_data.get(field.id, "") for field in grid.fields]
        writer.writerow(row)

    return output.getvalue().encode("utf-8")
