"""
Condenser loop model seen by the fluid cooler.

Provides the pieces of plant loop state a heat rejection unit interacts with:
nodes (temperature and mass flow), loop sizing data, the demand setpoint,
the flow lock set by the loop solver, the shared design flow registry and
flow request regulation.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fluid_cooler.core.enums import FlowLock, LoopDemandScheme
from fluid_cooler.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class LoopNode:
    """Fluid state at a loop connection point."""
    name: str
    temperature_c: float = 20.0
    mass_flow_rate: float = 0.0
    mass_flow_rate_min: float = 0.0
    mass_flow_rate_max: float = math.inf
    mass_flow_rate_max_avail: float = math.inf


@dataclass(frozen=True)
class PlantSizingData:
    """
    Loop level sizing data.

    Attributes:
        design_vol_flow_rate: Loop design volume flow (m3/s)
        design_exit_temp: Design supply (leaving) temperature (C)
        design_delta_t: Design loop temperature difference (K)
    """
    design_vol_flow_rate: float
    design_exit_temp: float
    design_delta_t: float


@dataclass(frozen=True)
class ComponentLocation:
    loop_name: str
    side: str
    branch: int
    component: int


@dataclass
class PlantLoop:
    """
    Condenser loop with a single supply side branch list.

    Example:
        loop = PlantLoop("Condenser Loop", setpoint_c=30.0,
                         sizing=PlantSizingData(0.0015, 30.0, 5.6))
        inlet = loop.node("Cooler Inlet")
    """
    name: str
    fluid: str = "WATER"
    demand_scheme: LoopDemandScheme = LoopDemandScheme.SINGLE_SETPOINT
    setpoint_c: float = 30.0
    setpoint_hi_c: Optional[float] = None
    min_temp_c: float = 5.0
    max_mass_flow_rate: float = math.inf
    sizing: Optional[PlantSizingData] = None
    flow_lock: FlowLock = FlowLock.LOCKED
    branches: List[List[str]] = field(default_factory=list)
    nodes: Dict[str, LoopNode] = field(default_factory=dict)
    design_flows: Dict[str, float] = field(default_factory=dict)

    def node(self, name: str) -> LoopNode:
        """Return the named node, creating it on first use."""
        if name not in self.nodes:
            self.nodes[name] = LoopNode(name)
        return self.nodes[name]

    @property
    def setpoint(self) -> float:
        """Leaving water setpoint according to the demand scheme."""
        if self.demand_scheme == LoopDemandScheme.DUAL_SETPOINT_DEADBAND:
            if self.setpoint_hi_c is None:
                raise ConfigurationError(
                    f"Loop '{self.name}' uses a dual setpoint scheme but has no high setpoint"
                )
            return self.setpoint_hi_c
        return self.setpoint_c

    def register_design_flow(self, inlet_node: str, vol_flow_rate: float) -> None:
        """Record a component's design volume flow (m3/s) against its inlet node."""
        self.design_flows[inlet_node] = vol_flow_rate
        logger.debug(f"Loop '{self.name}': design flow {vol_flow_rate:.6g} m3/s at '{inlet_node}'")

    def init_component_nodes(self, inlet: LoopNode, outlet: LoopNode, max_flow: float, min_flow: float = 0.0) -> None:
        """Reset the flow limits on a component's nodes at the start of an environment."""
        for node in (inlet, outlet):
            node.mass_flow_rate = 0.0
            node.mass_flow_rate_min = min_flow
            node.mass_flow_rate_max = max_flow
            node.mass_flow_rate_max_avail = max_flow

    def regulate_flow_request(self, inlet: LoopNode, outlet: LoopNode, requested: float) -> float:
        """
        Grant a component's mass flow request within loop and node limits.

        The granted flow is written to both nodes and returned.
        """
        granted = max(requested, 0.0)
        granted = min(granted, self.max_mass_flow_rate, inlet.mass_flow_rate_max_avail)
        if granted < inlet.mass_flow_rate_min:
            granted = inlet.mass_flow_rate_min
        inlet.mass_flow_rate = granted
        outlet.mass_flow_rate = granted
        return granted


class PlantTopology:
    """
    All loops of the plant, and the location of every component on them.

    Example:
        topology = PlantTopology([loop])
        location = topology.locate("Cooler 1")
    """

    def __init__(self, loops: Optional[List[PlantLoop]] = None) -> None:
        self.loops: Dict[str, PlantLoop] = {}
        for loop in loops or []:
            self.add_loop(loop)

    def add_loop(self, loop: PlantLoop) -> None:
        key = loop.name.upper()
        if key in self.loops:
            raise ConfigurationError(f"Plant loop '{loop.name}' defined twice")
        self.loops[key] = loop

    def get_loop(self, name: str) -> PlantLoop:
        try:
            return self.loops[name.upper()]
        except KeyError:
            raise ConfigurationError(f"Plant loop '{name}' not found") from None

    def locate(self, component_name: str) -> ComponentLocation:
        """
        Scan every loop branch for the component.

        Raises:
            ConfigurationError: If the component is on no loop
        """
        target = component_name.upper()
        for loop in self.loops.values():
            for branch_index, branch in enumerate(loop.branches):
                for comp_index, name in enumerate(branch):
                    if name.upper() == target:
                        return ComponentLocation(loop.name, "supply", branch_index, comp_index)
        raise ConfigurationError(
            f"Component '{component_name}' is not connected to any plant loop"
        )
