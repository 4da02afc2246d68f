"""An interactive Unix shell with built-ins, history, job control, redirection and pipes."""

__version__ = "0.1.0"
__all__ = ["__version__"]