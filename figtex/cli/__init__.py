"""Command line interface for figtex."""
