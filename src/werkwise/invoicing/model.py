from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class InvoiceLine:
    datum: str
    naam: str
    uren: float
    tarief: float
    subtotaal: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "datum": self.datum,
            "naam": self.naam,
            "uren": self.uren,
            "tarief": self.tarief,
            "subtotaal": self.subtotaal,
        }


@dataclass(frozen=True)
class Invoice:
    project_naam: str
    project_nummer: Optional[str]
    factuur_nummer: str
    factuur_datum: str
    vervaldatum: str
    lines: tuple[InvoiceLine, ...]
    totaal_uren: float
    totaal_bedrag: float
    btw_bedrag: float
    totaal_incl_btw: float

    @property
    def filename(self) -> str:
        return f"Factuur-{self.factuur_nummer}-{self.project_naam}.pdf"

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_naam": self.project_naam,
            "project_nummer": self.project_nummer,
            "factuur_nummer": self.factuur_nummer,
            "factuur_datum": self.factuur_datum,
            "vervaldatum": self.vervaldatum,
            "lines": [line.to_dict() for line in self.lines],
            "totaal_uren": self.totaal_uren,
            "totaal_bedrag": self.totaal_bedrag,
            "btw_bedrag": self.btw_bedrag,
            "totaal_incl_btw": self.totaal_incl_btw,
        }
