"""Domain errors and failure typing."""


class MicotecaError(Exception):
    """Base class for micoteca failures."""

    error_code = "MICOTECA_ERROR"


class ConfigError(MicotecaError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class DatasetError(MicotecaError):
    """Raised when a dataset is missing or has an unexpected shape."""

    error_code = "DATASET_ERROR"


class InvalidGeometry(MicotecaError):
    """Raised when a region payload cannot be resolved to a single outer ring."""

    error_code = "INVALID_GEOMETRY"


class MalformedCoordinate(MicotecaError):
    """Raised when a record's "<lat>, <lon>" string cannot be parsed."""

    error_code = "MALFORMED_COORDINATE"
