from roiboard.simulator.generator import ScenarioGenerator

__all__ = ["ScenarioGenerator"]
