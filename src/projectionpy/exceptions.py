# exceptions.py


class ConfigurationError(ValueError):
    """Raised for physically or numerically meaningless run parameters."""


class PressureNotConvergedWarning(RuntimeWarning):
    """The SOR pressure solve hit maxiter before reaching the tolerance."""
