"""
Photo Optimizer Library

Content-addressed JPEG optimization pipeline for raw photo uploads:
deduplication, lossy recompression, publication and CDN invalidation.
"""

__version__ = "1.0.0"
