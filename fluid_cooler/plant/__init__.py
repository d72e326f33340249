"""Condenser loop, nodes and outdoor environment."""
