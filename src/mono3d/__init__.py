"""Mono3D - Convert raster images into 3D-printable solids.

Mono3D traces iso-contours through an image's brightness field, nests them into
solids and holes with the even-odd rule, and extrudes the result into a
watertight mesh. A second "relief" mode displaces a regular grid by brightness
to produce a lithophane.

Example:
    $ mono3d logo.png

This will create logo-vector.stl next to the input image.
"""

__version__ = "0.1.0"
__author__ = "Mono3D contributors"

__all__ = ["__author__", "__version__"]
