"""dumpsock — capture one TCP stream and dump it to stdout."""

__version__ = "0.1.0"
