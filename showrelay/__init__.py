"""Real-time relay for host-driven quiz sessions."""

__version__ = "1.0.0"
