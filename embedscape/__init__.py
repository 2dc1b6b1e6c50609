"""
Embedscape: explore text embeddings as an interactive 2D/3D point cloud.
"""

__version__ = "0.1.0"
