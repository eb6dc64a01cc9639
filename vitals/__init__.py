"""Core domain logic for patient vitals monitoring.

This package contains the measurement store, the clinical detectors and the
evaluation engine, isolated from transports and data producers for easy
testing and reasoning.
"""
