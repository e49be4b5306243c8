"""Preview module for output and visualization.

Components:
    display: Matplotlib-based preview display
    export: PNG export through Pillow

Example:
    >>> from pathtracer.preview import save_png, show_preview
    >>> save_png(pixels, "image.png")
    >>> show_preview(pixels)
"""

from pathtracer.preview.display import show_preview
from pathtracer.preview.export import compute_rmse, image_to_pil, save_png

__all__ = [
    # Display functions
    "show_preview",
    # Export functions
    "save_png",
    "image_to_pil",
    "compute_rmse",
]
