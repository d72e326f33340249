"""
Simulation engine for condenser loop fluid coolers.

Execution Architecture:
    1. **Initialization**: every unit is bound to the timestep and registry.
    2. **Sizing**: each unit is called with ``init_loop_equip`` twice, once
       with first-size reporting and once with final-size reporting. Both
       passes write the same design values.
    3. **Timesteps**: weather and loop boundary conditions are advanced,
       then each unit is simulated with the loop flow unlocked (flow request
       only) and again with the flow locked (capacity control acts).
    4. **Results**: one ``get_state()`` row per unit per timestep, collected
       into a pandas DataFrame.

Units are called through ``ComponentRegistry.simulate`` with the handle
cached from the first call, the way a loop manager addresses equipment.
"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Any

import pandas as pd

from fluid_cooler.config.plant_builder import Plant
from fluid_cooler.core.enums import FlowLock
from fluid_cooler.core.exceptions import FluidCoolerError, SimulationError

logger = logging.getLogger(__name__)


class SimulationEngine:
    """
    Sizing and timestep driver for a built Plant.

    Example:
        plant = PlantBuilder.from_file("plant.yaml")
        engine = SimulationEngine(plant)
        results = engine.run()
    """

    def __init__(self, plant: Plant, steps: Optional[int] = None, output_path: Optional[Path] = None):
        """
        Args:
            plant: Assembled plant
            steps: Number of timesteps (default from configuration)
            output_path: CSV file for results (default from configuration)
        """
        self.plant = plant
        self.config = plant.config.simulation
        self.steps = steps if steps is not None else self.config.steps
        if output_path is None and self.config.results_file:
            output_path = Path(self.config.results_file)
            if not output_path.is_absolute() and plant.config.base_dir:
                output_path = Path(plant.config.base_dir) / output_path
        self.output_path = output_path

        self._handles: Dict[str, Optional[int]] = {c.name: None for c in plant.coolers}
        self.capacities: Dict[str, Any] = {}
        self.is_initialized = False
        self.is_sized = False
        self.current_hour = 0.0

    def initialize(self) -> None:
        """
        Raises:
            SimulationError: If a unit fails to initialize
        """
        logger.info("Initializing simulation engine...")
        try:
            self.plant.registry.initialize_all(dt=self.config.timestep_hours)
        except FluidCoolerError as e:
            raise SimulationError(f"Simulation initialization failed: {e}") from e
        self.is_initialized = True

    def _simulate(self, name: str, run_flag: bool, init_loop_equip: bool):
        handle, capacities = self.plant.registry.simulate(
            name, self._handles[name], run_flag=run_flag, init_loop_equip=init_loop_equip
        )
        self._handles[name] = handle
        return capacities

    def size(self) -> None:
        """
        Run the sizing calls for every unit.

        Sizing errors propagate unchanged so the caller sees the
        SizingError/SizingInfeasibleError raised by the unit.
        """
        if not self.is_initialized:
            self.initialize()

        env = self.plant.environment
        env.begin_environment = True
        flags = env.sizing
        flags.first_sizes_okay_to_finalize = True

        flags.first_sizes_okay_to_report = True
        flags.final_sizes_okay_to_report = False
        for name in self._handles:
            self._simulate(name, run_flag=True, init_loop_equip=True)

        flags.first_sizes_okay_to_report = False
        flags.final_sizes_okay_to_report = True
        for name in self._handles:
            self.capacities[name] = self._simulate(name, run_flag=True, init_loop_equip=True)
            logger.info(f"Fluid cooler '{name}' load range: {self.capacities[name]}")

        flags.final_sizes_okay_to_report = False
        self.is_sized = True

    def _apply_boundaries(self, hour: float) -> None:
        """Set unit inlet temperatures from loop boundary time series."""
        for cooler in self.plant.coolers:
            data = self.plant.boundaries.get(cooler.loop.name.upper())
            if data is None:
                continue
            row = data.iloc[int(hour) % len(data)]
            cooler.inlet_node.temperature_c = float(row["inlet_temp_c"])

    def _execute_timestep(self, index: int, hour: float) -> List[Dict[str, Any]]:
        env = self.plant.environment
        env.begin_environment = index == 0
        env.step(hour)
        self._apply_boundaries(hour)

        rows = []
        for cooler in self.plant.coolers:
            cooler.loop.flow_lock = FlowLock.UNLOCKED
            self._simulate(cooler.name, run_flag=True, init_loop_equip=False)
            cooler.loop.flow_lock = FlowLock.LOCKED
            self._simulate(cooler.name, run_flag=True, init_loop_equip=False)

            row = {"time_h": hour}
            row.update(cooler.get_state())
            rows.append(row)
        return rows

    def run(self) -> pd.DataFrame:
        """
        Size the plant and run every timestep.

        Returns:
            DataFrame with one row per unit per timestep

        Raises:
            SimulationError: If a timestep fails
        """
        if not self.is_sized:
            self.size()

        logger.info(f"Starting simulation: {self.steps} steps of {self.config.timestep_hours} h")
        start = time.time()
        rows: List[Dict[str, Any]] = []

        for index in range(self.steps):
            hour = index * self.config.timestep_hours
            self.current_hour = hour
            try:
                rows.extend(self._execute_timestep(index, hour))
            except FluidCoolerError as e:
                logger.error(f"Simulation failed at hour {hour}: {e}")
                raise SimulationError(f"Simulation execution failed at hour {hour}: {e}") from e

        elapsed = time.time() - start
        logger.info(f"Simulation complete: {self.steps} steps in {elapsed:.2f} seconds")
        self.plant.diagnostics.log_summary()

        results = pd.DataFrame(rows)
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            results.to_csv(self.output_path, index=False)
            logger.info(f"Results written to {self.output_path}")
        return results
