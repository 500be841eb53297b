"""Diagnostics for FishForge economies."""

from .economy_simulator import EconomySimulator, SimulationResult

__all__ = ["EconomySimulator", "SimulationResult"]
