"""
BioNLPProcessor: wires the biomedical stages into the generic pipeline.

Stages: TextNormalizer → [tokenizer] → TokenRepairer → [tagger] → TagCorrector
→ ConsistencyGuard → EntityMerger → EntityPostprocessor
"""

from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .annotation import Annotator
from .knowledge import (
    DEFAULT_GAZETTEERS,
    DEFAULT_PROTECTED_TERMS,
    DEFAULT_STOP_LIST,
    shared_gazetteer,
    shared_protected_terms,
    shared_stop_list,
)
from .ner import (
    ConsistencyGuard,
    EntityMerger,
    EntityPostprocessor,
    GazetteerMatcher,
    SequenceLabeler,
    build_labeler,
)
from .pipeline import Pipeline
from .preprocessing import TextNormalizer
from .stages import NoEntities, PassThroughTags, PassThroughText, PassThroughTokens
from .tagging import TagCorrector
from .tokenization import TokenRepairer
from .types import Document

logger = logging.getLogger(__name__)

# Default configuration (bundled knowledge bases)
DEFAULT_CONFIG: Dict[str, Any] = {
    "eager_load": True,
    "preprocessing": {
        "enabled": True,
        "remove_figure_references": True,
        "remove_bib_references": True,
    },
    "tokenization": {
        "enabled": True,
        "split_rules": ["slash", "dash_suffix"],
        "keep_delimiters": True,
    },
    "tagging": {
        "enabled": True,
    },
    "annotator": {
        "backend": "spacy",
        "model": "en_core_web_sm",
    },
    "ner": {
        "use_gazetteer": True,
        "use_labeler": True,
        "postprocess_entities": True,
        "max_gazetteer_tokens": None,
        "label_map": None,
        "labeler": {
            "backend": "transformer",
            "model": "models/bioner",
            "device": None,
            "max_length": 512,
        },
    },
    "resources": {
        "protected_terms": None,
        "gazetteers": None,
        "stop_list": None,
    },
}


def _deep_merge(default: Dict, override: Dict) -> Dict:
    """Recursively merge *override* into *default*."""
    result = default.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _build_annotator(config: Dict[str, Any]) -> Annotator:
    backend = config.get("backend", "spacy")
    if backend == "spacy":
        from .annotation.spacy_backend import SpacyAnnotator

        return SpacyAnnotator(model=config.get("model", "en_core_web_sm"))
    raise ValueError(f"Unknown annotator backend: {backend!r}. Available: ['spacy']")


class BioNLPProcessor:
    """
    Biomedical annotation pipeline.

    Example::

        proc = BioNLPProcessor()
        doc = proc.process_text("Ras-dependent ERK1/2 activation (see Figure 3).")
        for sentence in doc.sentences:
            print(sentence.words, sentence.entities)

    The external collaborators can be injected, which is how tests run
    without model weights::

        proc = BioNLPProcessor(annotator=my_annotator, labeler=my_labeler)

    Knowledge-base files and (with ``eager_load``) the annotator and the
    statistical model are loaded here, so a missing resource fails at
    construction rather than on the first document.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        annotator: Optional[Annotator] = None,
        labeler: Optional[SequenceLabeler] = None,
    ):
        self.config = _deep_merge(DEFAULT_CONFIG, config or {})
        self.logger = logging.getLogger(__name__)

        eager = self.config.get("eager_load", True)
        resources = self.config.get("resources", {})
        ner_cfg = self.config.get("ner", {})

        # Shared read-only resources
        self.protected_terms = shared_protected_terms(
            resources.get("protected_terms") or DEFAULT_PROTECTED_TERMS
        )

        # External pipeline
        self.annotator = annotator or _build_annotator(self.config.get("annotator", {}))
        if eager and hasattr(self.annotator, "load"):
            self.annotator.load()

        # Stages
        pre_cfg = self.config.get("preprocessing", {})
        self.normalizer = (
            TextNormalizer(pre_cfg) if pre_cfg.get("enabled", True) else PassThroughText()
        )
        tok_cfg = self.config.get("tokenization", {})
        self.repairer = (
            TokenRepairer(self.protected_terms, tok_cfg)
            if tok_cfg.get("enabled", True)
            else PassThroughTokens()
        )
        self.tag_corrector = (
            TagCorrector() if self.config.get("tagging", {}).get("enabled", True) else PassThroughTags()
        )
        self.entity_merger = self._build_entity_stage(ner_cfg, resources, labeler, eager)

        self.postprocessor: Optional[EntityPostprocessor] = None
        if ner_cfg.get("postprocess_entities", True):
            self.postprocessor = EntityPostprocessor(
                shared_stop_list(resources.get("stop_list") or DEFAULT_STOP_LIST)
            )

        self.pipeline = Pipeline(
            annotator=self.annotator,
            text_stage=self.normalizer,
            token_stage=self.repairer,
            tag_stage=self.tag_corrector,
            entity_stage=self.entity_merger,
            guard=ConsistencyGuard(),
            postprocessor=self.postprocessor,
        )
        logger.info(
            "BioNLPProcessor ready (annotator=%s, entities=%s)",
            self.annotator.name,
            type(self.entity_merger).__name__,
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_entity_stage(
        ner_cfg: Dict[str, Any],
        resources: Dict[str, Any],
        labeler: Optional[SequenceLabeler],
        eager: bool,
    ):
        matcher = None
        if ner_cfg.get("use_gazetteer", True):
            gazetteer = shared_gazetteer(resources.get("gazetteers") or DEFAULT_GAZETTEERS)
            matcher = GazetteerMatcher(gazetteer, max_tokens=ner_cfg.get("max_gazetteer_tokens"))

        if ner_cfg.get("use_labeler", True):
            if labeler is None:
                labeler_cfg = ner_cfg.get("labeler", {})
                labeler = build_labeler(labeler_cfg.get("backend", "transformer"), labeler_cfg)
            if eager:
                labeler.load()
        else:
            labeler = None

        if matcher is None and labeler is None:
            return NoEntities()
        return EntityMerger(matcher=matcher, labeler=labeler, label_map=ner_cfg.get("label_map"))

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process_text(self, text: str) -> Document:
        """Annotate raw text."""
        return self.pipeline.run(text)

    def process(self, source: Union[str, Path]) -> Document:
        """Annotate a UTF-8 text file."""
        path = Path(source)
        document = self.process_text(path.read_text(encoding="utf-8"))
        document.metadata["source_path"] = str(path)
        return document

    def process_batch(
        self,
        texts: Iterable[str],
        max_workers: Optional[int] = None,
    ) -> List[Document]:
        """Annotate independent documents concurrently; order is preserved."""
        texts = list(texts)
        if max_workers == 1 or len(texts) <= 1:
            return [self.process_text(t) for t in texts]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(self.process_text, texts))

    def process_directory(
        self,
        input_dir: Union[str, Path],
        file_pattern: str = "*.txt",
        save_output: bool = False,
        output_dir: Optional[Union[str, Path]] = None,
    ) -> List[Document]:
        """Annotate all files matching *file_pattern* in *input_dir*."""
        input_dir = Path(input_dir)
        documents: List[Document] = []
        for path in sorted(input_dir.glob(file_pattern)):
            if not path.is_file():
                continue
            try:
                document = self.process(path)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Failed to process %s: %s", path, exc)
                continue
            if save_output:
                self._save_output(document, path, output_dir)
            documents.append(document)
        return documents

    # ------------------------------------------------------------------
    # Summary stats
    # ------------------------------------------------------------------

    def get_summary_statistics(self, document: Document) -> Dict[str, Any]:
        """Return summary statistics for an annotated document."""
        entity_types: Dict[str, int] = {}
        for sentence in document.sentences:
            for label in sentence.entities or []:
                if label.startswith("B-"):
                    entity_types[label[2:]] = entity_types.get(label[2:], 0) + 1
        return {
            "text_length": len(document.text),
            "num_sentences": len(document.sentences),
            "num_tokens": document.token_count,
            "num_entities": sum(entity_types.values()),
            "entity_types": entity_types,
            "ner_skipped": document.metadata.get("ner_skipped", False),
        }

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    @staticmethod
    def _save_output(
        document: Document,
        source_path: Path,
        output_dir: Optional[Union[str, Path]],
    ) -> None:
        out_dir = Path(output_dir) if output_dir else source_path.parent
        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = out_dir / f"{source_path.stem}_annotated.json"
        out_path.write_text(json.dumps(document.to_dict(), indent=2))
