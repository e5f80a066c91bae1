"""Chunked unsigned integers: container, cursor, add, render."""
