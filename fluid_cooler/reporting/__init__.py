"""Sizing report sink."""
