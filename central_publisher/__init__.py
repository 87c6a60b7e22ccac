"""Bundle, upload and track Maven publications on the Central Portal."""

__version__ = "0.3.0"
