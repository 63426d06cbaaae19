"""
Integration tests for complete BioNLP workflows

Tests end-to-end pipelines that combine the real spaCy annotator with the
biomedical correction stages.
"""

import json

import pytest

from bionlp import BioNLP
from bionlp.processors import BioNLPProcessor


@pytest.mark.integration
class TestTextWorkflow:
    """Integration tests with injected collaborators"""

    def test_text_to_json(self, sample_bio_text, fake_annotator, fake_labeler, temp_output_dir):
        """Test complete workflow: text → annotation → JSON export"""
        bio = BioNLP(annotator=fake_annotator, labeler=fake_labeler)

        doc = bio.annotate(sample_bio_text)
        assert doc.metadata["ner_skipped"] is False

        words = [t.word for t in doc.iter_tokens()]
        assert "Figure" not in words
        assert "Smith" not in words
        assert "ERK1/2" in words
        assert "PI3K/AKT" in words

        out_path = temp_output_dir / "doc.json"
        out_path.write_text(json.dumps(doc.to_dict()))
        data = json.loads(out_path.read_text())
        assert len(data["sentences"]) == len(doc.sentences)

    def test_batch_workflow(self, fake_annotator, fake_labeler, temp_dir):
        """Test batch processing workflow"""
        for i in range(3):
            (temp_dir / f"abstract_{i}.txt").write_text(f"BRCA1 binds p53 in cohort {i}.")

        processor = BioNLPProcessor(annotator=fake_annotator, labeler=fake_labeler)
        docs = processor.process_directory(temp_dir)

        assert len(docs) == 3
        stats = [processor.get_summary_statistics(d) for d in docs]
        assert all(s["num_entities"] == 2 for s in stats)


@pytest.mark.integration
@pytest.mark.requires_models
class TestSpacyWorkflow:
    """Integration tests with a downloaded spaCy model"""

    def test_real_annotator(self, sample_bio_text):
        bio = BioNLP(config={"ner": {"use_labeler": False}})
        doc = bio.annotate(sample_bio_text)

        assert len(doc.sentences) >= 2
        assert all(t.tag for t in doc.iter_tokens())
        for token in doc.iter_tokens():
            assert sample_bio_text[token.start : token.end] == token.word

    def test_ubiquitinates_tagged_as_verb(self):
        bio = BioNLP(config={"ner": {"use_labeler": False}})
        doc = bio.annotate("Mdm2 ubiquitinates p53.")
        tags = dict(zip(doc.sentences[0].words, doc.sentences[0].tags))
        assert tags["ubiquitinates"] == "VBZ"
