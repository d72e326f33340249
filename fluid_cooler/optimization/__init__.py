"""Numerical kernels, property caches and root finding."""
