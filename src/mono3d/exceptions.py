"""Exception and warning hierarchy for Mono3D."""


class Mono3DError(Exception):
    """Base exception for all Mono3D errors."""

    pass


class ImageError(Mono3DError):
    """Errors related to image loading."""

    pass


class ImageDecodeError(ImageError):
    """Image could not be loaded or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to decode image '{path}': {reason}")


class PixelBufferError(ValueError, Mono3DError):
    """Pixel buffer does not match the declared resolution."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Pixel buffer has {actual} bytes, expected {expected} (resolution^2 * 4)"
        )


class GeometryError(Mono3DError):
    """Errors in geometric construction."""

    pass


class MeshBuildError(GeometryError):
    """Sub-meshes could not be merged into a single mesh."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Mesh build failed: {reason}")


class ExportError(Mono3DError):
    """Errors related to writing meshes."""

    pass


class MeshExportError(ExportError):
    """Error writing a mesh file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to export mesh '{path}': {reason}")


class AdvisoryError(Mono3DError):
    """The advisory service failed or returned an unusable answer."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Advisory request failed: {reason}")


class EmptyResultWarning(UserWarning):
    """No contours were traced at the current threshold.

    Not an error: the resulting mesh is legitimately empty and there is
    nothing to export.
    """

    pass


class DroppedHoleWarning(UserWarning):
    """Hole contours without an enclosing solid were discarded."""

    pass
