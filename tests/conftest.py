"""
Shared pytest fixtures and configuration for BioNLP tests

This module provides common fixtures, fake collaborators, and test data
that can be used across all test modules.
"""

import re
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# Add BioNLP to path
bionlp_path = Path(__file__).parent.parent
sys.path.insert(0, str(bionlp_path))

from bionlp.processors.bio.annotation import Annotator  # noqa: E402
from bionlp.processors.bio.knowledge import (  # noqa: E402
    Gazetteer,
    ProtectedTermTable,
    clear_shared_resources,
)
from bionlp.processors.bio.ner import SequenceLabeler  # noqa: E402
from bionlp.processors.bio.types import Annotation, Sentence, Token  # noqa: E402

_TOKEN_RE = re.compile(r"\w+|[^\w\s]")


# ============================================================================
# Fake Collaborators
# ============================================================================


def regex_tokens(text: str, offset: int = 0) -> List[Token]:
    """Split *text* into word and punctuation tokens with offsets."""
    return [
        Token(word=m.group(), start=m.start() + offset, end=m.end() + offset)
        for m in _TOKEN_RE.finditer(text)
    ]


class FakeAnnotator(Annotator):
    """Regex tokenizer that ends sentences at '.', '!' and '?'.

    Every token is tagged ``NN`` and lemmatized to its lowercase form.
    ``merge_on_tag`` makes the tagger join the first two sentences, the way
    a real tagger re-segments text.
    """

    def __init__(self, merge_on_tag: bool = False, drop_token_on_tag: bool = False):
        self.merge_on_tag = merge_on_tag
        self.drop_token_on_tag = drop_token_on_tag
        self.tag_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def tokenize(self, text: str) -> List[List[Token]]:
        sentences: List[List[Token]] = []
        current: List[Token] = []
        for token in regex_tokens(text):
            current.append(token)
            if token.word in (".", "!", "?"):
                sentences.append(current)
                current = []
        if current:
            sentences.append(current)
        return sentences

    def tag(self, sentences: Sequence[Sentence]) -> Annotation:
        self.tag_calls += 1
        tagged = [
            [Token(t.word, t.start, t.end, tag="NN", lemma=t.word.lower()) for t in s.tokens]
            for s in sentences
        ]
        if self.merge_on_tag and len(tagged) > 1:
            tagged = [tagged[0] + tagged[1]] + tagged[2:]
        if self.drop_token_on_tag and tagged and tagged[-1]:
            tagged[-1] = tagged[-1][:-1]
        return Annotation(sentences=tagged, metadata={"annotator": self.name})


class FakeLabeler(SequenceLabeler):
    """Statistical labeler stand-in: fixed label per word, ``O`` otherwise."""

    def __init__(self, labels: Optional[Dict[str, str]] = None):
        self.labels = labels or {}
        self.load_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def load(self) -> None:
        self.load_calls += 1

    def label(self, tokens: Sequence[Token]) -> List[str]:
        return [self.labels.get(t.word, "O") for t in tokens]


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Path to BioNLP project root"""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def kb_dir(project_root):
    """Path to the bundled knowledge-base files"""
    return project_root / "bionlp" / "data" / "kb"


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_bio_text():
    """Sample biomedical text for testing"""
    return (
        "Ras-dependent ERK1/2 activation (see Figure 3) requires ATP. "
        "Mdm2 ubiquitinates p53 in the nucleus [12, 14]. "
        "BRCA1 binds PI3K/AKT as reported (Smith et al., 2010)."
    )


@pytest.fixture
def three_sentence_text():
    """Text the fake tokenizer splits into exactly three sentences"""
    return "BRCA1 binds p53. Mdm2 ubiquitinates p53. ATP is hydrolyzed."


@pytest.fixture
def make_tokens():
    """Factory: text -> regex tokens with offsets"""
    return regex_tokens


@pytest.fixture
def make_sentence():
    """Factory: text -> Sentence of regex tokens"""

    def _make(text: str) -> Sentence:
        return Sentence(tokens=regex_tokens(text))

    return _make


# ============================================================================
# Knowledge-base Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_shared_resources():
    """Every test starts with an empty shared-resource registry"""
    clear_shared_resources()
    yield
    clear_shared_resources()


@pytest.fixture
def protected_terms():
    """Small protected-term table"""
    return ProtectedTermTable(["GM-CSF", "IL-2", "ERK1/2", "PI3K/AKT"])


@pytest.fixture
def gazetteer():
    """Small gazetteer with single- and multi-token entries"""
    return Gazetteer(
        {
            "BRCA1": "Gene_or_gene_product",
            "p53": "Gene_or_gene_product",
            "ERK1/2": "Gene_or_gene_product",
            "epidermal growth factor": "Gene_or_gene_product",
            "epidermal growth factor receptor": "Gene_or_gene_product",
            "ATP": "Simple_chemical",
            "plasma membrane": "Cellular_component",
        }
    )


# ============================================================================
# Fake Model Fixtures
# ============================================================================


@pytest.fixture
def fake_annotator():
    """Annotator that needs no model"""
    return FakeAnnotator()


@pytest.fixture
def resegmenting_annotator():
    """Annotator whose tagger merges the first two sentences"""
    return FakeAnnotator(merge_on_tag=True)


@pytest.fixture
def truncating_annotator():
    """Annotator whose tagger loses the last token of the document"""
    return FakeAnnotator(drop_token_on_tag=True)


@pytest.fixture
def fake_labeler():
    """Labeler emitting model-vocabulary labels for a few words"""
    return FakeLabeler({"Mdm2": "B-GENE", "the": "B-SIMPLE_CHEMICAL", "kinase": "B-GENE"})


@pytest.fixture
def labeler_factory():
    """Factory: {word: label} -> labeler"""
    return FakeLabeler


# ============================================================================
# Temporary File Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_kb_files(temp_dir):
    """Protected terms, gazetteer and stop list written to disk"""
    protected = temp_dir / "protected.txt"
    protected.write_text("# protected\nGM-CSF\nERK1/2\n\n", encoding="utf-8")

    gazetteer_path = temp_dir / "gazetteer.tsv"
    gazetteer_path.write_text(
        "# surface\ttype\n"
        "BRCA1\tGene_or_gene_product\n"
        "ATP\tSimple_chemical\n",
        encoding="utf-8",
    )

    stop_list = temp_dir / "stop.txt"
    stop_list.write_text("The\ncells\n", encoding="utf-8")

    return {
        "protected_terms": protected,
        "gazetteers": [gazetteer_path],
        "stop_list": stop_list,
    }


@pytest.fixture
def temp_output_dir(temp_dir):
    """Temporary output directory"""
    output_dir = temp_dir / "outputs"
    output_dir.mkdir(exist_ok=True)
    return output_dir


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def bio_config():
    """Processor configuration that loads nothing eagerly"""
    return {
        "eager_load": False,
        "ner": {"labeler": {"backend": "transformer", "model": "models/bioner"}},
    }


@pytest.fixture
def bionlp_config():
    """Sample BioNLP configuration"""
    return {
        "tokenization": {"split_rules": ["slash"]},
        "ner": {"use_labeler": False},
    }


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Pytest configuration hook"""
    # Add custom markers
    config.addinivalue_line("markers", "slow: mark test as slow running")
    config.addinivalue_line("markers", "integration: mark test as an end-to-end workflow")
    config.addinivalue_line("markers", "requires_models: mark test as requiring model weights")


def pytest_collection_modifyitems(config, items):
    """Modify test items during collection"""
    # Skip slow tests unless --runslow is passed
    skip_slow = pytest.mark.skip(reason="need --runslow option to run")
    skip_models = pytest.mark.skip(reason="need --runmodels option to run")

    for item in items:
        if "slow" in item.keywords and not config.getoption("--runslow", default=False):
            item.add_marker(skip_slow)
        if "requires_models" in item.keywords and not config.getoption(
            "--runmodels", default=False
        ):
            item.add_marker(skip_models)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption("--runslow", action="store_true", default=False, help="run slow tests")
    parser.addoption(
        "--runmodels", action="store_true", default=False, help="run tests requiring model weights"
    )
