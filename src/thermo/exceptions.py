"""Exception types for the thermophysical property models."""


class ThermoError(RuntimeError):
    """Base class for property-model errors."""


class ConfigurationMissing(ThermoError, KeyError):
    """Raised when a phase has no property dictionary, no model tag, or a
    required field has neither stored state nor an initial condition."""

    def __str__(self):
        # KeyError quotes its message otherwise
        return str(self.args[0]) if self.args else ""


class UnknownModelTag(ThermoError):
    """Raised when no model constructor is registered for a configured tag."""


class InvalidMethod(ThermoError):
    """Raised when the saturation-pressure method tag is unknown or unset."""


class FieldSetNotAllocated(ThermoError):
    """Raised when a model is used before its field set was allocated."""
