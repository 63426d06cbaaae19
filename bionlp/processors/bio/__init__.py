"""
BioNLP biomedical processor subpackage.

Modular pipeline: Normalization → Tokenization → Token repair → Tagging
→ Tag correction → Consistency guard → Hybrid NER
"""

from .annotation import Annotator
from .knowledge import Gazetteer, ProtectedTermTable, ResourceLoadError
from .ner import ConsistencyGuard, EntityMerger, EntityPostprocessor, GazetteerMatcher, SequenceLabeler
from .pipeline import Pipeline
from .preprocessing import TextNormalizer
from .processor import DEFAULT_CONFIG, BioNLPProcessor
from .tagging import TagCorrector
from .tokenization import TokenRepairer
from .types import Annotation, Document, GuardReport, Sentence, Token

__all__ = [
    "BioNLPProcessor",
    "DEFAULT_CONFIG",
    "Pipeline",
    "Annotation",
    "Document",
    "GuardReport",
    "Sentence",
    "Token",
    "Annotator",
    "SequenceLabeler",
    "TextNormalizer",
    "TokenRepairer",
    "TagCorrector",
    "GazetteerMatcher",
    "EntityMerger",
    "EntityPostprocessor",
    "ConsistencyGuard",
    "Gazetteer",
    "ProtectedTermTable",
    "ResourceLoadError",
]
