"""Batch and folder-watch automation around the analysis engine."""
