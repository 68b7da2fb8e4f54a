from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from ..common.datetime_utils import format_date
from ..registrations.model import TimeRegistration

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_REGISTRATION_COLUMNS = ["Datum", "Gebruiker", "Project", "Werktype", "Uren", "Omschrijving", "Kilometers", "Status"]


def registrations_to_xlsx(registrations: Iterable[TimeRegistration]) -> bytes:
    rows = [
        (
            reg.datum,
            reg.user_naam or "",
            reg.project_naam or reg.project_display_naam or "",
            reg.werktype,
            reg.aantal_uren,
            reg.werkomschrijving,
            reg.driven_kilometers,
            reg.status.value,
        )
        for reg in registrations
    ]
    df = pd.DataFrame(rows, columns=_REGISTRATION_COLUMNS)
    if not df.empty:
        df["Datum"] = df["Datum"].map(format_date)

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Urenregistraties")
    return out.getvalue()
