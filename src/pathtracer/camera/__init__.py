"""Camera module for primary ray generation.

Components:
    sensor: Fixed-eye pinhole sensor built from viewport height, aspect ratio
        and focal length

Ray generation uses normalized image-plane coordinates:
    u in [0, 1]: left to right across the image
    v in [0, 1]: bottom to top across the image
"""

from .sensor import Sensor

__all__ = [
    "Sensor",
]
