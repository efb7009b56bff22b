"""Utility helpers shared across chatbridge modules."""
