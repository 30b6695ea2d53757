"""Pydantic input/output models: snapshots, samples, predictions, stats."""
