"""Generic step graph and runner."""

from .graph import Step, StepGraph, StepRunner

__all__ = ["Step", "StepGraph", "StepRunner"]
