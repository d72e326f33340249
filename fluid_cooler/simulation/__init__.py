"""Simulation engine and command-line runner."""
