class ProductSpaceError(Exception):
    """Base class for errors raised by product_space."""


class UnknownNameError(ProductSpaceError, KeyError):
    """
    Raised when a result view is asked for a name that is not in its index.

    Parameters
    ----------
      - name : str
          The label that was looked up.
      - axis : str
          Which index was searched ('country' or 'product').
    """
    def __init__(self, name, axis: str = "index") -> None:
        self.name = name
        self.axis = axis
        super().__init__(name, axis)

    def __str__(self) -> str:
        return f"{self.axis} {self.name!r} not found"


class IngestionError(ProductSpaceError, ValueError):
    """Raised when an observations file cannot be turned into matrices."""
