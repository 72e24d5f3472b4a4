"""Errors raised while parsing requirements and building manifests."""


class ParseError(ValueError):
    """Raised when a dependency specifier cannot be parsed."""


class DuplicateNameError(ValueError):
    """Raised when a manifest defines the same package name more than once."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate package name in manifest: {name}")
        self.name = name
