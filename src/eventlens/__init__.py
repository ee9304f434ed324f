"""
EventLens - deterministic synthetic analytics events and dashboard aggregates
"""

__version__ = "1.0.0"
