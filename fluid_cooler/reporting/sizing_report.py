"""
Sizing report sink.

Collects (equipment type, name, label, value) entries for every design value
a unit resolves or uses, plus equipment summary rows. Entries are logged as
they arrive and can be exported as a DataFrame.
"""

import logging
from dataclasses import dataclass
from typing import List

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SizingEntry:
    equipment_type: str
    name: str
    label: str
    value: float


class SizingReport:
    """
    Example:
        report = SizingReport()
        report.report("FluidCooler:SingleSpeed", "Cooler 1",
                      "Design Water Flow Rate [m3/s]", 0.0015)
        df = report.to_dataframe()
    """

    def __init__(self) -> None:
        self.entries: List[SizingEntry] = []
        self.summary: List[SizingEntry] = []

    def report(self, equipment_type: str, name: str, label: str, value: float) -> None:
        self.entries.append(SizingEntry(equipment_type, name, label, float(value)))
        logger.info(f"{equipment_type} '{name}': {label} = {value:.6g}")

    def predefined(self, equipment_type: str, name: str, label: str, value: float) -> None:
        """Equipment summary table row (type and nominal capacity)."""
        self.summary.append(SizingEntry(equipment_type, name, label, float(value)))

    def values_for(self, name: str) -> dict:
        """Latest reported value per label for one unit."""
        key = name.upper()
        return {e.label: e.value for e in self.entries if e.name.upper() == key}

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            [vars(e) for e in self.entries],
            columns=["equipment_type", "name", "label", "value"],
        )
