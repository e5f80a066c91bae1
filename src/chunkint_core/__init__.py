"""Leaf layer: constants, config, status/errors, and the chunk pool."""
