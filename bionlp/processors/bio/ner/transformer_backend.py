"""Transformer labeler: HuggingFace token classification over pre-split words."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..types import OUTSIDE, LabelSequence, Token
from .base import SequenceLabeler

logger = logging.getLogger(__name__)


class TransformerLabeler(SequenceLabeler):
    """Label tokens with a token-classification checkpoint.

    Each word gets the prediction of its first sub-word piece. Words cut off
    by ``max_length`` truncation are labeled ``O``.
    """

    @property
    def name(self) -> str:
        return "transformer"

    def __init__(
        self,
        model: str = "models/bioner",
        device: Optional[str] = None,
        max_length: int = 512,
    ):
        self._model_name = model
        self._device = device
        self._max_length = max_length
        self._tokenizer = None
        self._model = None
        self._id2label: Dict[int, str] = {}
        self._lock = threading.Lock()

    def load(self) -> None:
        if self._model is not None:
            return
        with self._lock:
            if self._model is not None:
                return
            try:
                import torch
                from transformers import AutoModelForTokenClassification, AutoTokenizer
            except ImportError:
                raise ImportError(
                    "transformer labeler requires transformers and torch. "
                    "Install with: pip install 'bionlp[transformers]'"
                )
            try:
                logger.info("Loading token-classification model: %s", self._model_name)
                tokenizer = AutoTokenizer.from_pretrained(self._model_name, use_fast=True)
                model = AutoModelForTokenClassification.from_pretrained(self._model_name)
            except Exception as exc:
                raise RuntimeError(
                    f"Failed to load transformer NER model '{self._model_name}': {exc}"
                ) from exc

            device = self._device or ("cuda" if torch.cuda.is_available() else "cpu")
            model.to(device)
            model.eval()
            self._device = device
            self._id2label = {int(k): v for k, v in model.config.id2label.items()}
            self._tokenizer = tokenizer
            self._model = model
            logger.info("Loaded %s on %s", self._model_name, device)

    def label(self, tokens: Sequence[Token]) -> LabelSequence:
        if not tokens:
            return []
        self.load()
        import torch

        words = [t.word for t in tokens]
        encoding = self._tokenizer(
            words,
            is_split_into_words=True,
            truncation=True,
            max_length=self._max_length,
            return_tensors="pt",
        )
        word_ids = encoding.word_ids(0)
        inputs = {k: v.to(self._device) for k, v in encoding.items()}
        with torch.no_grad():
            logits = self._model(**inputs).logits[0]
        predictions = np.argmax(logits.detach().cpu().numpy(), axis=-1)

        labels: List[str] = [OUTSIDE] * len(words)
        seen = set()
        for position, word_id in enumerate(word_ids):
            if word_id is None or word_id in seen:
                continue
            seen.add(word_id)
            labels[word_id] = self._id2label.get(int(predictions[position]), OUTSIDE)
        return labels
