"""
CLI (Command Line Interface) for the CV comparison engine.

This is a thin wrapper around the engine. All comparison logic lives in the
cvdiff package so it stays reusable by other presentation layers.
"""
