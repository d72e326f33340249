"""
Fluid Cooler - Main Package

Steady-state model of dry closed-circuit fluid coolers (single- and
two-speed fans) on a condenser loop:
- Cross-flow ε-NTU coil model
- UA autosizing from loop design data or nominal capacity
- Fan capacity control to a leaving water setpoint
- Configuration-driven plant assembly and simulation engine
"""

__version__ = "1.0.0"
