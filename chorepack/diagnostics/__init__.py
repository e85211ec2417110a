"""Diagnostics for tuning pack draws."""

from .draw_simulator import DrawSimulator, SimulationResult

__all__ = ["DrawSimulator", "SimulationResult"]
