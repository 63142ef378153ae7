"""
Derivatives are images deterministically generated from an article's base image.
Today that means a JPEG rendition at a requested width.

Renditions are costly enough to compute that they are written back next to the
base image the first time they are asked for, and served from there afterwards.
"""

from . import cache, imaging, schemas
