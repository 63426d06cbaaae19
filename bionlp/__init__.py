"""
BioNLP: Biomedical correction layer over a general-purpose NLP pipeline

Main module providing a unified interface for annotating biomedical text.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

# Import processors
from .processors import BioNLPProcessor
from .processors.bio.types import Document

__version__ = "0.1.0"


class BioNLP:
    """
    Main BioNLP interface for biomedical text annotation

    Example:
        >>> bio = BioNLP()
        >>> doc = bio.annotate("Ras-dependent ERK1/2 activation (see Figure 3).")
        >>> bio.summary(doc)["num_entities"]
    """

    def __init__(self, config: Dict = None, **components):
        """
        Initialize BioNLP

        Args:
            config: Configuration dictionary merged over the processor defaults.
                   Example:
                   {
                       "ner": {"use_labeler": False},
                       "tokenization": {"split_rules": ["slash"]}
                   }
            **components: ``annotator=`` / ``labeler=`` instances to use
                   instead of the configured backends.
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.processor = BioNLPProcessor(config=self.config, **components)

    def annotate(self, text: str) -> Document:
        """
        Annotate one document

        Args:
            text: Raw biomedical text

        Returns:
            Document with sentences, tags, lemmas and (unless skipped) entities
        """
        return self.processor.process_text(text)

    def annotate_file(self, path: Union[str, Path]) -> Document:
        """Annotate a UTF-8 text file."""
        return self.processor.process(path)

    def annotate_batch(
        self,
        texts: Iterable[str],
        max_workers: Optional[int] = None,
    ) -> List[Document]:
        """
        Annotate independent documents concurrently

        Args:
            texts: Raw documents
            max_workers: Thread pool size (``None`` lets the executor decide)

        Returns:
            Documents in input order

        Example:
            >>> bio = BioNLP()
            >>> docs = bio.annotate_batch(["BRCA1 binds p53.", "ATP is hydrolyzed."])
        """
        texts = list(texts)
        documents = self.processor.process_batch(texts, max_workers=max_workers)
        self.logger.info("Annotated %s documents", len(documents))
        return documents

    def summary(self, document: Document) -> Dict[str, Any]:
        """Summary statistics for an annotated document."""
        return self.processor.get_summary_statistics(document)


__all__ = ["BioNLP", "BioNLPProcessor", "Document", "__version__"]
