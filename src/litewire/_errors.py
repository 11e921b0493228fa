from __future__ import annotations


class ResolutionError(RuntimeError):
    pass


class TypeNotFound(ResolutionError):
    """Raised when a type name cannot be located or introspected."""

    def __init__(self, type_name: str, reason: str | None = None) -> None:
        msg = f"Cannot locate type {type_name!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.type_name = type_name


class ConstructionFailed(ResolutionError):
    """Raised when the constructor raises or a required parameter stays unresolved."""

    def __init__(self, type_name: str, reason: str, parameter: str | None = None) -> None:
        if parameter is not None:
            msg = f"Cannot construct {type_name} (parameter '{parameter}'): {reason}"
        else:
            msg = f"Cannot construct {type_name}: {reason}"
        super().__init__(msg)
        self.type_name = type_name
        self.parameter = parameter
