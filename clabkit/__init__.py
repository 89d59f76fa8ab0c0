"""Topology model and runtime helpers for container-based network labs."""

__version__ = "0.1.0"