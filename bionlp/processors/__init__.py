"""
BioNLP Processors Module

Provides the biomedical annotation processor.
"""

from .bio import BioNLPProcessor

__all__ = [
    "BioNLPProcessor",
]
