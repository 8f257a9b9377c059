"""Error and warning types raised by the atmosphere evaluator."""


class InvalidInput(ValueError):
    """Unrecognised unit system, field name or method, or a bad altitude."""


class OutOfRangeWarning(UserWarning):
    """Altitude outside the reference table; boundary values were used."""
