"""Exception hierarchy for contourcam."""


class ContourCamError(Exception):
    """Base exception for all contourcam errors."""

    pass


class ConfigError(ContourCamError):
    """Errors related to loading or validating configuration."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration '{path}': {reason}")


class JobConfigError(ConfigError):
    """A job asks for a tool and operation combination that cannot be machined."""

    def __init__(self, job_name: str, reason: str) -> None:
        self.job_name = job_name
        super().__init__(f"job {job_name}", reason)


class InputError(ContourCamError):
    """Errors related to reading vector artwork."""

    pass


class SvgLoadError(InputError):
    """Error loading an SVG file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load SVG '{path}': {reason}")


class SvgElementError(InputError):
    """A single SVG element could not be turned into a primitive."""

    def __init__(self, element_id: str, reason: str) -> None:
        self.element_id = element_id
        self.reason = reason
        super().__init__(f"Unsupported SVG element '{element_id}': {reason}")


class GeometryError(ContourCamError):
    """Errors in geometric calculations."""

    pass


class DegenerateEdgeError(GeometryError):
    """An edge was requested between two coincident points."""

    def __init__(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        super().__init__(f"Zero-length edge at ({x:g}, {y:g})")


class ShapeConstructionError(GeometryError):
    """A shape could not be built from its input points or dimensions."""

    def __init__(self, shape: str, reason: str) -> None:
        self.shape = shape
        self.reason = reason
        super().__init__(f"Cannot build {shape}: {reason}")


class IntersectionError(GeometryError):
    """Error calculating intersections."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class MotionStateError(ContourCamError):
    """A motion command was issued in a state that does not allow it."""

    def __init__(self, command: str, state: str) -> None:
        self.command = command
        self.state = state
        super().__init__(f"Cannot {command} while {state}")
