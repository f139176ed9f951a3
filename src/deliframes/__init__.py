"""deliframes - blank AVI key frames for datamoshing."""

__version__ = "0.1.0"
