"""Error kinds raised by the engine.

Math-layer errors are raised by the operation that hit the problem and are
never replaced by a default value. Scene-loading errors abort the whole scene.
"""


class PrismError(Exception):
    """Base class for all engine errors."""


class DegenerateTransform(PrismError, ValueError):
    """An inverse was requested for a matrix whose determinant is (near) zero."""


class NumericDegeneracy(PrismError, ArithmeticError):
    """A zero-length vector was normalized."""


class InvalidSceneEntry(PrismError, ValueError):
    """A scene entry is malformed or names an unknown kind.

    Attributes:
        path: Location of the offending entry, e.g. "[2].body.transforms[1]".
    """

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(f"{message} (at {path})" if path else message)
