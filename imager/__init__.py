"""
Imager

Derives named variants (resized, cropped, resized-then-cropped or
original) from uploaded images and stores them on one or more
storage backends.
"""

__version__ = "1.0.0"
