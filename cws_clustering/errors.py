# -*- coding: utf-8 -*-
"""Exceptions raised by the clustering pipeline. Each carries the stage that failed."""


class ClusterPipelineError(ValueError):
    stage = "pipeline"

    def __init__(self, message: str, stage: str = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage

    def __str__(self):
        return f"{self.stage}: {self.args[0]}"


class ConfigError(ClusterPipelineError):
    stage = "config"


class SchemaError(ClusterPipelineError):
    """An expected column is missing from the input table."""
    stage = "loader"


class DataValidationError(ClusterPipelineError):
    """A binary column holds a value outside {0, 1} (or a missing value)."""
    stage = "loader"


class DimensionError(ClusterPipelineError):
    stage = "distance"


class ConvergenceError(ClusterPipelineError):
    """The requested number of clusters cannot be cut from the dendrogram."""
    stage = "clusterer"
