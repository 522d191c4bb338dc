"""
Term sheet import: text extraction, parsing and room matching.
"""

from .pipeline import TermImportPipeline, validate_file

__all__ = ["TermImportPipeline", "validate_file"]
