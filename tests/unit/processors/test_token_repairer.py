"""
Unit tests for TokenRepairer

Tests protected-term merging, compound splitting, and conservation of
character offsets.
"""

import pytest

from bionlp.processors.bio.knowledge import ProtectedTermTable
from bionlp.processors.bio.tokenization import SPLIT_RULES, TokenRepairer
from bionlp.processors.bio.types import Token


def _words(tokens):
    return [t.word for t in tokens]


def _spans(tokens):
    return [(t.start, t.end) for t in tokens]


class TestProtectedTermMerge:
    """Test merging of protected terms split by the tokenizer"""

    def test_merge_dash_and_slash_terms(self, protected_terms, make_tokens):
        tokens = make_tokens("GM-CSF and ERK1/2")
        repaired = TokenRepairer(protected_terms).repair_tokens(tokens)

        assert _words(repaired) == ["GM-CSF", "and", "ERK1/2"]
        assert _spans(repaired) == [(0, 6), (7, 10), (11, 17)]

    def test_merge_prefers_longest_term(self, make_tokens):
        table = ProtectedTermTable(["PI3K/AKT", "PI3K/AKT/mTOR"])
        tokens = make_tokens("PI3K/AKT/mTOR signaling")
        repaired = TokenRepairer(table).merge_protected(tokens)

        assert _words(repaired) == ["PI3K/AKT/mTOR", "signaling"]

    def test_no_merge_across_whitespace(self, protected_terms, make_tokens):
        tokens = make_tokens("GM - CSF")
        repaired = TokenRepairer(protected_terms).merge_protected(tokens)
        assert _words(repaired) == ["GM", "-", "CSF"]

    def test_merge_is_case_sensitive(self, protected_terms, make_tokens):
        tokens = make_tokens("gm-csf")
        repaired = TokenRepairer(protected_terms).merge_protected(tokens)
        assert len(repaired) == 3

    def test_merged_token_spans_original_range(self, protected_terms, make_tokens):
        text = "levels of IL-2 rose"
        tokens = make_tokens(text)
        repaired = TokenRepairer(protected_terms).repair_tokens(tokens)

        merged = [t for t in repaired if t.word == "IL-2"][0]
        assert text[merged.start : merged.end] == "IL-2"

    def test_empty_table_is_noop(self, make_tokens):
        tokens = make_tokens("GM-CSF")
        assert TokenRepairer().merge_protected(tokens) == tokens


class TestCompoundSplit:
    """Test the slash and dash-suffix split rules"""

    def test_slash_split(self):
        repaired = TokenRepairer().split_token(Token("Ras/Raf", 0, 7))
        assert _words(repaired) == ["Ras", "/", "Raf"]
        assert _spans(repaired) == [(0, 3), (3, 4), (4, 7)]

    def test_slash_split_without_delimiters(self):
        repairer = TokenRepairer(config={"keep_delimiters": False})
        repaired = repairer.split_token(Token("Ras/Raf", 0, 7))
        assert _words(repaired) == ["Ras", "Raf"]

    def test_dash_suffix_split(self):
        repaired = TokenRepairer().split_token(Token("Ras-dependent", 10, 23))
        assert _words(repaired) == ["Ras", "-", "dependent"]
        assert _spans(repaired) == [(10, 13), (13, 14), (14, 23)]

    def test_slash_compound_inside_dash_suffix(self):
        repaired = TokenRepairer().split_token(Token("Ras/Raf-dependent", 4, 21))
        assert _words(repaired) == ["Ras", "/", "Raf", "-", "dependent"]
        assert _spans(repaired) == [(4, 7), (7, 8), (8, 11), (11, 12), (12, 21)]

    def test_nested_split_without_delimiters(self):
        repairer = TokenRepairer(config={"keep_delimiters": False})
        repaired = repairer.split_token(Token("MEK/ERK-mediated", 0, 16))
        assert _words(repaired) == ["MEK", "ERK", "mediated"]

    def test_protected_piece_not_split_again(self, protected_terms):
        repaired = TokenRepairer(protected_terms).split_token(Token("ERK1/2-dependent", 0, 16))
        assert _words(repaired) == ["ERK1/2", "-", "dependent"]

    def test_dash_with_unknown_suffix_kept(self):
        token = Token("anti-tumor", 0, 10)
        assert TokenRepairer().split_token(token) == [token]

    def test_protected_token_not_split(self, protected_terms):
        token = Token("ERK1/2", 0, 6)
        assert TokenRepairer(protected_terms).split_token(token) == [token]

    def test_token_with_inconsistent_offsets_kept(self):
        token = Token("Ras/Raf", 0, 9)
        assert TokenRepairer().split_token(token) == [token]

    def test_only_configured_rules_apply(self):
        repairer = TokenRepairer(config={"split_rules": ["dash_suffix"]})
        token = Token("Ras/Raf", 0, 7)
        assert repairer.split_token(token) == [token]

    def test_unknown_rule_raises(self):
        with pytest.raises(ValueError, match="Unknown split rule"):
            TokenRepairer(config={"split_rules": ["hyphen"]})

    def test_rule_table(self):
        assert set(SPLIT_RULES) == {"slash", "dash_suffix"}


class TestOffsetConservation:
    """Test that repaired tokens always point into the original text"""

    def test_words_match_text_slices(self, protected_terms, make_tokens):
        text = "PI3K/AKT signaling is Ras/Raf-dependent in GM-CSF treated cells"
        tokens = make_tokens(text)
        repaired = TokenRepairer(protected_terms).repair_tokens(tokens)

        for token in repaired:
            assert text[token.start : token.end] == token.word
        assert repaired[0].start == tokens[0].start
        assert repaired[-1].end == tokens[-1].end
        assert "PI3K/AKT" in _words(repaired)
        assert "GM-CSF" in _words(repaired)

    def test_split_pieces_cover_token(self):
        token = Token("MEK/ERK/p38", 5, 16)
        pieces = TokenRepairer().split_token(token)

        assert pieces[0].start == token.start
        assert pieces[-1].end == token.end
        assert "".join(_words(pieces)) == token.word
        assert all(a.end == b.start for a, b in zip(pieces, pieces[1:]))
