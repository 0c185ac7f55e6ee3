"""Sweep machinery: reference model, generation, properties, runner."""
