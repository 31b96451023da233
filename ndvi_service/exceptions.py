class NdviServiceError(Exception):
    """Base class for failures raised while serving an NDVI request."""


class ValidationError(NdviServiceError):
    """Request is missing a coordinate or carries one that is not a number."""


class AuthError(NdviServiceError):
    """Earth Engine credentials could not be loaded or were rejected."""


class RemoteComputeError(NdviServiceError):
    """Earth Engine failed to build or evaluate the NDVI query."""
