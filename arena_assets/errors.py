"""
Error taxonomy for arena_assets.

Every decode failure raised while building the asset table derives from
AssetError so callers can catch the whole family at once, while each class
also inherits the closest builtin exception for code that only cares about
the broad category.
"""


class AssetError(Exception):
    """Base class for all asset decoding and lookup errors."""
    pass


class ResourceNotFound(AssetError, FileNotFoundError):
    """Raised when a named resource is absent from the archive."""

    def __init__(self, name: str, where: str = ""):
        self.name = name
        message = f"Resource not found: {name}"
        if where:
            message += f" (in {where})"
        super().__init__(message)


class MalformedRecord(AssetError, ValueError):
    """Raised when a byte layout or text record does not match its format."""
    pass


class KeyNotFound(AssetError, KeyError):
    """Raised when a template text key is unknown."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Template key not found: {key!r}")

    def __str__(self) -> str:
        return str(self.args[0])


class UnrecognizedCategoryCode(AssetError, ValueError):
    """Raised when a question choice carries an unknown class category code."""
    pass


class UnrecognizedRule(AssetError, ValueError):
    """Raised for an unknown name rule or an out-of-range race/gender slot."""
    pass


class IndexOutOfRange(AssetError, IndexError):
    """Raised when an indexed record points outside its fixed-size table."""
    pass


class AssetTableStateError(AssetError, RuntimeError):
    """Raised when the asset table is used outside of its Ready state."""
    pass
