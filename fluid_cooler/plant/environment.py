"""
Outdoor conditions and simulation-wide flags.

The Environment supplies the entering air state for every fluid cooler and
the flags that drive initialisation and sizing:

    begin_environment   first timestep of a run period; per-environment
                        flow initialisation happens here
    warmup              warmup days; runtime warnings are suppressed
    sizing              gates on writing and reporting autosized values

Weather can be fixed or read from a CSV time series with columns
``dry_bulb_c``, ``wet_bulb_c`` and optionally ``pressure_pa``. Rows are
hourly; timesteps inside an hour hold the hour's value and the series wraps
around after its last row.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import pandas as pd

from fluid_cooler.core.constants import StandardConditions
from fluid_cooler.core.exceptions import ConfigurationError
from fluid_cooler.properties.psychrometrics import Psychrometrics

logger = logging.getLogger(__name__)


@dataclass
class SizingFlags:
    """Plant sizing gates, toggled by the simulation driver."""
    first_sizes_okay_to_finalize: bool = True
    first_sizes_okay_to_report: bool = True
    final_sizes_okay_to_report: bool = False


@dataclass
class OutdoorAirNode:
    """
    Outdoor air inlet node for a unit.

    A node follows the weather unless ``fixed`` is set, in which case it
    keeps the conditions it was created with.
    """
    name: str
    dry_bulb_c: float = 20.0
    wet_bulb_c: float = 15.0
    humidity_ratio: float = 0.008
    pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA
    fixed: bool = False


@dataclass
class Environment:
    """
    Current outdoor air state plus run flags.

    Example:
        env = Environment(psychrometrics=Psychrometrics())
        env.set_conditions(dry_bulb_c=35.0, wet_bulb_c=25.6)
        env.begin_environment = True
    """
    psychrometrics: Psychrometrics = field(default_factory=Psychrometrics)
    dry_bulb_c: float = 20.0
    wet_bulb_c: float = 15.0
    humidity_ratio: float = 0.008
    pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA
    begin_environment: bool = True
    warmup: bool = False
    sizing: SizingFlags = field(default_factory=SizingFlags)
    outdoor_air_nodes: Dict[str, OutdoorAirNode] = field(default_factory=dict)
    weather_data: Optional[pd.DataFrame] = None

    def __post_init__(self) -> None:
        self._dry_bulb: Optional[np.ndarray] = None
        self._wet_bulb: Optional[np.ndarray] = None
        self._pressure: Optional[np.ndarray] = None
        if self.weather_data is not None:
            self._cache_weather(self.weather_data)

    @classmethod
    def from_weather_file(
        cls, path: Path | str, psychrometrics: Optional[Psychrometrics] = None
    ) -> "Environment":
        """
        Load an hourly weather CSV.

        Raises:
            ConfigurationError: If the file is missing or lacks required columns
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"Weather file not found: {path}")
        try:
            data = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Failed to parse weather file {path}: {e}") from e

        env = cls(psychrometrics=psychrometrics or Psychrometrics(), weather_data=data)
        logger.info(f"Loaded {len(data)} weather rows from {path}")
        return env

    def _cache_weather(self, data: pd.DataFrame) -> None:
        missing = {"dry_bulb_c", "wet_bulb_c"} - set(data.columns)
        if missing:
            raise ConfigurationError(f"Weather data missing columns: {sorted(missing)}")
        if data.empty:
            raise ConfigurationError("Weather data has no rows")

        self._dry_bulb = pd.to_numeric(data["dry_bulb_c"], errors="raise").to_numpy(dtype=float)
        self._wet_bulb = pd.to_numeric(data["wet_bulb_c"], errors="raise").to_numpy(dtype=float)
        if "pressure_pa" in data:
            self._pressure = pd.to_numeric(data["pressure_pa"], errors="raise").to_numpy(dtype=float)
        else:
            self._pressure = np.full(len(data), StandardConditions.STD_BARO_PRESS_PA)

    def set_conditions(
        self,
        dry_bulb_c: float,
        wet_bulb_c: float,
        pressure_pa: float = StandardConditions.STD_BARO_PRESS_PA,
    ) -> None:
        """Set the outdoor state; humidity ratio follows from the wet-bulb."""
        self.dry_bulb_c = dry_bulb_c
        self.wet_bulb_c = wet_bulb_c
        self.pressure_pa = pressure_pa
        self.humidity_ratio = self.psychrometrics.humidity_ratio_from_wet_bulb(
            dry_bulb_c, wet_bulb_c, pressure_pa
        )
        for node in self.outdoor_air_nodes.values():
            if not node.fixed:
                node.dry_bulb_c = self.dry_bulb_c
                node.wet_bulb_c = self.wet_bulb_c
                node.humidity_ratio = self.humidity_ratio
                node.pressure_pa = self.pressure_pa

    def step(self, t: float) -> None:
        """Advance weather to simulation time t (hours)."""
        if self._dry_bulb is None:
            return
        idx = int(t) % len(self._dry_bulb)
        self.set_conditions(
            float(self._dry_bulb[idx]),
            float(self._wet_bulb[idx]),
            float(self._pressure[idx]),
        )

    def outdoor_air_node(self, name: str) -> OutdoorAirNode:
        """Return the named outdoor air node, creating it from current weather."""
        key = name.upper()
        if key not in self.outdoor_air_nodes:
            self.outdoor_air_nodes[key] = OutdoorAirNode(
                name=name,
                dry_bulb_c=self.dry_bulb_c,
                wet_bulb_c=self.wet_bulb_c,
                humidity_ratio=self.humidity_ratio,
                pressure_pa=self.pressure_pa,
            )
        return self.outdoor_air_nodes[key]
