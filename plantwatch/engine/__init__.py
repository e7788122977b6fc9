"""
Simulation Engine
=================

Panel health & series-circuit simulation for one string of panels:
- Repair lifecycle of a single fault target per string
- Random fault injection into healthy strings
- Series-limited current set by the weakest panel
- Downstream propagation of the fault origin's state
"""

from .models import Panel, PanelState, StringState, from_wire
from .simulate import simulate_string

__all__ = ["Panel", "PanelState", "StringState", "from_wire", "simulate_string"]
