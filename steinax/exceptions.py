"""Exceptions raised by steinax."""


class SteinaxError(Exception):
    """Base exception for steinax errors."""


class ConfigurationError(SteinaxError, ValueError):
    """Raised when a kernel, density or algorithm configuration is invalid."""


class NumericalError(SteinaxError, ArithmeticError):
    """Raised when a score, kernel value or particle update is not finite."""
