"""codemaster_py - coding practice client with durable progress tracking."""

__version__ = "1.0.0"
