"""Per-sample Delaunay triangulation over the image plane."""

from .delaunay import TriangleMesh, triangulate

__all__ = ["TriangleMesh", "triangulate"]
