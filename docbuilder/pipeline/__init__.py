"""Documentation build pipeline."""

from .runner import DocumentationBuildPipeline

__all__ = ["DocumentationBuildPipeline"]
