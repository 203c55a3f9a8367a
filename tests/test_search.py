"""
Tests for LexicalSearch scoring, filtering and ranking.
"""

from think_workspace.models.core import Relationship
from think_workspace.services.search import LexicalSearch, score_thought
from think_workspace.utils.config import ChainConfig, SearchConfig


class TestScoring:

    def test_full_query_and_words_in_content(self, make_thought):
        thought = make_thought(1, content='The cache layer needs invalidation')

        # +10 full query, +2 for each of the two words
        assert score_thought(thought, 'cache layer') == 14

    def test_case_insensitive(self, make_thought):
        thought = make_thought(1, content='Database MIGRATION plan')

        assert score_thought(thought, 'migration') == 12

    def test_tag_and_mode_matches(self, make_thought):
        thought = make_thought(1, content='unrelated text', mode='critical', tags=['critical-path', 'perf'])

        # +5 tag, +3 mode
        assert score_thought(thought, 'critical') == 8

    def test_relationship_bonus_only_for_matches(self, make_thought):
        thought = make_thought(1, content='retry policy', relates_to='thought_0', relationship_type='refines')
        thought.relationships_out.append(Relationship('thought_0', 'refines'))

        assert score_thought(thought, 'retry') == 13
        assert score_thought(thought, 'nothing here') == 0

    def test_partial_word_match_counts(self, make_thought):
        thought = make_thought(1, content='we should shard the queue')

        # full query absent, one of two words present
        assert score_thought(thought, 'queue partitioning') == 2


class TestSearch:

    def test_ranking_is_stable_for_ties(self, make_thought):
        thoughts = [
            make_thought(1, content='alpha one'),
            make_thought(2, content='beta'),
            make_thought(3, content='alpha two'),
            make_thought(4, content='alpha alpha', tags=['alpha']),
        ]

        result = LexicalSearch().search(thoughts, 'alpha')

        assert [r['id'] for r in result['results']] == ['thought_4', 'thought_1', 'thought_3']
        assert result['total_found'] == 3
        assert result['searched_thoughts'] == 4
        assert result['results'][0]['relevance_score'] == 17

    def test_exclude_thought(self, make_thought):
        thoughts = [make_thought(1, content='alpha'), make_thought(2, content='alpha')]

        result = LexicalSearch().search(thoughts, 'alpha', exclude_thought_id='thought_1')

        assert [r['id'] for r in result['results']] == ['thought_2']
        assert result['searched_thoughts'] == 1

    def test_relationship_type_filter(self, make_thought):
        thoughts = [
            make_thought(1, content='alpha'),
            make_thought(2, content='alpha', relates_to='thought_1', relationship_type='supports'),
            make_thought(3, content='alpha', relates_to='thought_1', relationship_type='contradicts'),
        ]

        result = LexicalSearch().search(thoughts, 'alpha', relationship_types=['contradicts', 'refines'])

        assert [r['id'] for r in result['results']] == ['thought_3']

    def test_limit_is_clamped(self, make_thought):
        thoughts = [make_thought(n, content='alpha') for n in range(30)]
        search = LexicalSearch(SearchConfig(default_limit=10, max_limit=20))

        assert len(search.search(thoughts, 'alpha')['results']) == 10
        assert len(search.search(thoughts, 'alpha', limit=50)['results']) == 20
        assert len(search.search(thoughts, 'alpha', limit=0)['results']) == 1
        assert search.search(thoughts, 'alpha', limit=50)['total_found'] == 30

    def test_result_preview(self, make_thought):
        thoughts = [make_thought(1, content='alpha ' + 'x' * 200)]

        entry = LexicalSearch().search(thoughts, 'alpha')['results'][0]

        assert entry['content_preview'].endswith('...')
        assert len(entry['content_preview']) == 123

    def test_result_preview_uses_configured_length(self, make_thought):
        thoughts = [make_thought(1, content='alpha ' + 'x' * 200)]
        chain = ChainConfig(max_hops=20, visible_length=7, preview_length=40, related_limit=3)

        entry = LexicalSearch(chain_config=chain).search(thoughts, 'alpha')['results'][0]

        assert entry['content_preview'] == ('alpha ' + 'x' * 200)[:40] + '...'
