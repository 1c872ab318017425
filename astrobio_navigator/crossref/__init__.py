# astrobio_navigator/crossref/__init__.py

"""
Cross-reference analysis: uploaded PDF -> keywords -> related catalog
papers -> citations and cross-references.
"""

from .pipeline import CrossReferencePipeline, PipelineStage, analyze_document
from .scoring import rank_related_papers

__all__ = ["CrossReferencePipeline", "PipelineStage", "analyze_document", "rank_related_papers"]
