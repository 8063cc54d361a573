"""Workboard backend: workload allocation and capacity service"""

__version__ = "1.0.0"
