"""Tests for the retrieval-and-answer turn."""

import logging

from pdf_chat.config import CONTEXT_SEPARATOR
from pdf_chat.history import NO_HISTORY
from pdf_chat.rag_pipeline import (
    ANSWERED,
    EMPTY_CONTEXT,
    ERROR,
    NO_MATCHES,
    answer_question,
    build_context,
    render_prompt,
)
from pdf_chat.vector_index import SearchMatch
from tests.conftest import FakeIndex, FakeModelProvider


class TestAnswerQuestion:
    """Happy path and short-circuits."""

    def test_answer_is_recorded_in_history(self, models, index, history):
        result = answer_question("What year?", models, index, history, top_k=5)

        assert result.status == ANSWERED
        assert result.ok
        assert result.answer == "42"
        assert len(history) == 1
        assert history.turns[0].question == "What year?"
        assert history.turns[0].answer == "42"

    def test_queries_index_with_embedding_and_top_k(self, models, index, history):
        answer_question("What year?", models, index, history, top_k=3)

        assert models.embedded == ["What year?"]
        vector, top_k = index.queries[0]
        assert top_k == 3
        assert len(vector) == 8

    def test_zero_matches_skips_chat_model(self, models, history):
        history.record("earlier", "answer")
        result = answer_question("anything", models, FakeIndex(matches=[]), history, top_k=5)

        assert result.status == NO_MATCHES
        assert models.prompts == []
        assert [t.question for t in history] == ["earlier"]

    def test_only_empty_text_matches_skips_chat_model(self, models, history):
        index = FakeIndex(matches=[SearchMatch(id="x", score=0.8), SearchMatch(id="y", score=0.1, text="")])
        result = answer_question("anything", models, index, history, top_k=5)

        assert result.status == EMPTY_CONTEXT
        assert models.prompts == []
        assert len(history) == 0

    def test_embedding_failure_leaves_history_unchanged(self, index, history):
        models = FakeModelProvider(fail_embed=True)
        result = answer_question("q", models, index, history, top_k=5)

        assert result.status == ERROR
        assert "provider unreachable" in result.error
        assert index.queries == []
        assert len(history) == 0

    def test_completion_failure_leaves_history_unchanged(self, index, history):
        models = FakeModelProvider(fail_complete=True)
        result = answer_question("q", models, index, history, top_k=5)

        assert result.status == ERROR
        assert len(models.prompts) == 1
        assert len(history) == 0

    def test_prompt_includes_history_context_and_question(self, models, index, history):
        history.record("Who wrote it?", "The finance team.")
        answer_question("What year?", models, index, history, top_k=5)

        prompt = models.prompts[0]
        assert "[Turn 1]\nUser: Who wrote it?\nAssistant: The finance team." in prompt
        assert "The report covers fiscal 2023." in prompt
        assert "Current Question: What year?" in prompt

    def test_first_question_uses_empty_history_sentinel(self, models, index, history):
        answer_question("What year?", models, index, history, top_k=5)
        assert NO_HISTORY in models.prompts[0]


class TestBuildContext:
    """Context assembly from search matches."""

    def test_orders_by_descending_score_and_drops_empty(self):
        matches = [
            SearchMatch(score=0.2, text="low"),
            SearchMatch(score=0.9, text="high"),
            SearchMatch(score=0.5, text=""),
            SearchMatch(score=0.6, text="mid"),
        ]
        assert build_context(matches) == CONTEXT_SEPARATOR.join(["high", "mid", "low"])

    def test_all_empty_gives_empty_string(self):
        assert build_context([SearchMatch(score=1.0)]) == ""

    def test_render_prompt_substitutes_all_fields(self):
        prompt = render_prompt("H", "C", "Q")
        assert "Previous Conversation History:\nH" in prompt
        assert "Context from the documentation:\nC" in prompt
        assert "Current Question: Q" in prompt


class TestExpectedOutcomes:
    """No-match outcomes are reported by the caller, not logged as problems."""

    def test_no_matches_logs_no_warning(self, models, history, caplog):
        answer_question("q", models, FakeIndex(matches=[]), history, top_k=5)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_empty_context_logs_no_warning(self, models, history, caplog):
        index = FakeIndex(matches=[SearchMatch(score=0.5)])
        answer_question("q", models, index, history, top_k=5)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
