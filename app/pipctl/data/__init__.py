"""Bundled data files for pipctl."""
