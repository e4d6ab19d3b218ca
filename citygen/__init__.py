"""Geometry, road graphs, lanes, parking slots and procedural city road generation."""

__version__ = "0.1.0"

__all__ = ["geometry", "network", "road", "parking", "roadgraph", "heatmap", "rules", "generator"]