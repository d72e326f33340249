"""
Command-line runner for fluid cooler simulations.

Workflow:
    1. Load plant configuration from YAML/JSON.
    2. Build loops, environment and units via PlantBuilder.
    3. Size every unit and run the timesteps.
    4. Write timestep results and the sizing report.
"""

from pathlib import Path
from typing import Optional, List
import logging
import argparse

import pandas as pd

from fluid_cooler.config.plant_builder import PlantBuilder
from fluid_cooler.core.exceptions import FluidCoolerError
from fluid_cooler.simulation.engine import SimulationEngine

logger = logging.getLogger(__name__)


def run_simulation_from_config(
    config_path: Path | str,
    output_path: Optional[Path] = None,
    steps: Optional[int] = None,
) -> pd.DataFrame:
    """
    Run a complete simulation from a configuration file.

    Example:
        >>> results = run_simulation_from_config("plant.yaml", steps=24)
        >>> results.groupby("component_id")["heat_rejected_w"].mean()
    """
    logger.info(f"Running simulation from config: {config_path}")
    plant = PlantBuilder.from_file(config_path)
    engine = SimulationEngine(plant, steps=steps, output_path=output_path)
    results = engine.run()

    if output_path is not None:
        sizing_path = Path(output_path).with_name(Path(output_path).stem + "_sizing.csv")
        plant.sizing_report.to_dataframe().to_csv(sizing_path, index=False)
        logger.info(f"Sizing report written to {sizing_path}")

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Usage:
        fluid-cooler-simulate plant.yaml --output results.csv --steps 48
    """
    parser = argparse.ArgumentParser(description="Run a condenser loop fluid cooler simulation.")
    parser.add_argument("config_file", type=str, help="Path to the plant configuration YAML/JSON file.")
    parser.add_argument("--output", type=str, default=None, help="CSV file for timestep results.")
    parser.add_argument("--steps", type=int, default=None, help="Number of timesteps to run.")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level.")

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')

    try:
        run_simulation_from_config(
            config_path=args.config_file,
            output_path=Path(args.output) if args.output else None,
            steps=args.steps,
        )
    except FluidCoolerError as e:
        logger.error(f"Simulation aborted: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
