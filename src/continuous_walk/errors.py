class WalkError(ValueError):
    """
    Base class for errors raised while generating or assembling walks.
    The CLI reports these without a traceback.
    """


class InvalidParameter(WalkError):
    """A generation or assembly parameter is out of range (num_steps, sd, count, time_step, duration)."""


class DimensionMismatch(WalkError):
    """The time axis and the walks being aligned on it differ in length."""
