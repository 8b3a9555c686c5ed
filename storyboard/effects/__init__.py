"""Procedural shape and text effects."""
