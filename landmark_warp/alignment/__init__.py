"""Procrustes alignment against a learned mean shape."""

from .procrustes import ShapeAligner, project_sample, train_mean_shape

__all__ = ["ShapeAligner", "project_sample", "train_mean_shape"]
