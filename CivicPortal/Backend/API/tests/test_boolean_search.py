"""Tests for the boolean listing search."""

import pytest

from utils.boolean_search import filter_with_boolean_search, match_boolean_search, parse_boolean_query


class TestParse:
    @pytest.mark.parametrize('query, expected', [
        ('food pantry', (['food pantry'], [], [])),
        ('food AND housing', (['food', 'housing'], [], [])),
        ('food OR housing', ([], ['food', 'housing'], [])),
        ('food and housing not shelter', (['food', 'housing'], [], ['shelter'])),
        ('"legal aid" OR (immigration)', ([], ['legal aid', 'immigration'], [])),
    ])
    def test_operators(self, query, expected):
        assert parse_boolean_query(query) == expected


class TestMatch:
    def test_all_and_terms_required(self):
        assert match_boolean_search('Food pantry and housing help', 'food AND housing')[0] is True
        assert match_boolean_search('Food pantry', 'food AND housing')[0] is False

    def test_not_excludes(self):
        assert match_boolean_search('Senior food pantry', 'food NOT senior') == (False, 0.0)

    def test_or_scores_by_coverage(self):
        matches, score = match_boolean_search('Food only', 'food OR housing')
        assert matches is True
        assert score == 50.0

    def test_word_boundaries(self):
        assert match_boolean_search('Foodbank', 'food')[0] is False

    def test_punctuation_is_ignored(self):
        assert match_boolean_search('Free X-Ray screening', 'x ray')[0] is True


class TestFilter:
    def test_ranks_by_coverage(self):
        items = ['food', 'food and housing', 'jobs']
        result = filter_with_boolean_search(items, 'food OR housing', lambda s: [s])
        assert result == ['food and housing', 'food']

    def test_blank_query_keeps_everything(self):
        assert filter_with_boolean_search(['a', 'b'], '   ', lambda s: [s]) == ['a', 'b']
