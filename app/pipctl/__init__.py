"""pipctl - parallel package installs for the active Python environment."""

__version__ = "0.1.0"
