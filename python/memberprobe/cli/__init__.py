"""Command line entry point: ``python -m memberprobe.cli``."""
