"""Reconstruction stages. Pure functions over domain models, no I/O."""
