"""
PlantBuilder: Factory for configuration-driven plant assembly.

Builds condenser loops, the outdoor environment and every fluid cooler from
a PlantConfig, registering the coolers with a ComponentRegistry.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import logging
import math

import pandas as pd

from fluid_cooler.components.cooling.fluid_cooler import FluidCooler
from fluid_cooler.config.loader import ConfigLoader
from fluid_cooler.config.models import PlantConfig, PlantLoopSpec
from fluid_cooler.core.component_registry import ComponentRegistry
from fluid_cooler.core.diagnostics import DiagnosticThrottle
from fluid_cooler.core.exceptions import ConfigurationError
from fluid_cooler.plant.environment import Environment
from fluid_cooler.plant.loop import PlantLoop, PlantTopology
from fluid_cooler.properties.fluid_properties import FluidProperties
from fluid_cooler.properties.psychrometrics import Psychrometrics
from fluid_cooler.reporting.sizing_report import SizingReport

logger = logging.getLogger(__name__)


@dataclass
class Plant:
    """Everything a simulation run needs, owned together."""
    config: PlantConfig
    registry: ComponentRegistry
    topology: PlantTopology
    environment: Environment
    sizing_report: SizingReport
    diagnostics: DiagnosticThrottle
    coolers: List[FluidCooler] = field(default_factory=list)
    # Loop name (upper case) -> boundary time series
    boundaries: Dict[str, pd.DataFrame] = field(default_factory=dict)


class PlantBuilder:
    """
    Factory for building fluid cooler plants from configuration.

    Example:
        plant = PlantBuilder.from_file("fluid_cooler/config/examples/two_speed_plant.yaml")
        plant.registry.initialize_all(dt=1.0)
    """

    def __init__(self, config: PlantConfig):
        self.config = config
        self.registry = ComponentRegistry()
        self.fluid_properties = FluidProperties()
        self.psychrometrics = Psychrometrics()

    @classmethod
    def from_file(cls, config_path: Path | str) -> Plant:
        config = ConfigLoader().load(config_path)
        return cls(config).build()

    @classmethod
    def from_config(cls, config: PlantConfig) -> Plant:
        return cls(config).build()

    @classmethod
    def from_dict(cls, config_dict: dict) -> Plant:
        config = ConfigLoader().from_dict(config_dict)
        return cls(config).build()

    def _path(self, name: str) -> Path:
        path = Path(name)
        if not path.is_absolute() and self.config.base_dir:
            path = Path(self.config.base_dir) / path
        return path

    def _build_environment(self) -> Environment:
        sim = self.config.simulation
        if sim.weather_file:
            env = Environment.from_weather_file(self._path(sim.weather_file), self.psychrometrics)
        else:
            env = Environment(psychrometrics=self.psychrometrics)
        env.set_conditions(sim.dry_bulb_c, sim.wet_bulb_c, sim.pressure_pa)
        return env

    def _build_loop(self, spec: PlantLoopSpec) -> PlantLoop:
        loop = PlantLoop(
            name=spec.name,
            fluid=spec.fluid,
            demand_scheme=spec.demand_scheme,
            setpoint_c=spec.setpoint_c,
            setpoint_hi_c=spec.setpoint_hi_c,
            min_temp_c=spec.min_temp_c,
            max_mass_flow_rate=spec.max_mass_flow_rate if spec.max_mass_flow_rate is not None else math.inf,
            sizing=spec.sizing.to_sizing_data() if spec.sizing else None,
            branches=[list(branch) for branch in spec.branches],
        )
        return loop

    def _load_boundary(self, spec: PlantLoopSpec) -> Optional[pd.DataFrame]:
        if not spec.boundary_file:
            return None
        path = self._path(spec.boundary_file)
        if not path.exists():
            raise ConfigurationError(f"Loop boundary file not found: {path}")
        try:
            data = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ConfigurationError(f"Failed to parse loop boundary file {path}: {e}") from e
        if "inlet_temp_c" not in data.columns or data.empty:
            raise ConfigurationError(f"Loop boundary file {path} needs rows with an 'inlet_temp_c' column")
        return data

    def build(self) -> Plant:
        """
        Assemble the plant.

        Raises:
            ConfigurationError: Invalid design inputs or missing files
        """
        logger.info("Building fluid cooler plant...")
        topology = PlantTopology()
        boundaries: Dict[str, pd.DataFrame] = {}
        for loop_spec in self.config.loops:
            topology.add_loop(self._build_loop(loop_spec))
            boundary = self._load_boundary(loop_spec)
            if boundary is not None:
                boundaries[loop_spec.name.upper()] = boundary

        environment = self._build_environment()
        sizing_report = SizingReport()
        diagnostics = DiagnosticThrottle()

        coolers = []
        for spec in self.config.fluid_coolers:
            loop = topology.get_loop(spec.loop)
            cooler = FluidCooler(
                spec,
                loop,
                topology,
                environment,
                sizing_report=sizing_report,
                diagnostics=diagnostics,
                fluid_properties=self.fluid_properties,
                psychrometrics=self.psychrometrics,
            )
            self.registry.register(spec.name, cooler)
            coolers.append(cooler)

        for loop_spec in self.config.loops:
            loop = topology.get_loop(loop_spec.name)
            for cooler in coolers:
                if cooler.loop is loop:
                    cooler.inlet_node.temperature_c = loop_spec.inlet_temp_c

        logger.info(f"Plant built with {len(self.registry)} fluid cooler(s)")
        return Plant(
            config=self.config,
            registry=self.registry,
            topology=topology,
            environment=environment,
            sizing_report=sizing_report,
            diagnostics=diagnostics,
            coolers=coolers,
            boundaries=boundaries,
        )
