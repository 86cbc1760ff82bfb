"""Tests for the editor session accept/reject flow."""

from __future__ import annotations

import re
from unittest.mock import MagicMock

import pytest

from writeflow.models.notice import NoticeKind
from writeflow.pipeline.editor_session import BUSY_NOTICE, STALE_NOTICE, EditorSession
from writeflow.pipeline.scheduler import AnalysisScheduler
from writeflow.store.suggestion_store import AnalysisState

CORRECTED = "Yesterday I went to the store and bought some apples for my family."


@pytest.fixture
def loaded_store(store, sample_text, sample_raw_suggestions):
    store.begin_analysis(sample_text)
    store.complete_analysis(sample_text, sample_raw_suggestions)
    return store


@pytest.fixture
def session(loaded_store, sample_text):
    return EditorSession(loaded_store, sample_text)


def _id_of(store, original: str) -> str:
    return next(s.id for s in store.suggestions if s.original == original)


class TestAccept:
    def test_applies_and_moves_cursor(self, session, loaded_store):
        notice = session.accept(_id_of(loaded_store, "goed"))

        assert notice.kind is NoticeKind.SUCCESS
        assert notice.title == "Suggestion applied"
        assert notice.description == 'Changed "goed" to "went"'
        assert session.text.startswith("Yesterday I went to the store")
        assert session.cursor_offset == len("Yesterday I went")
        assert len(loaded_store) == 2

    def test_sequential_accepts_relocate(self, session, loaded_store):
        for original in ("goed", "buyed", "mines"):
            assert session.accept(_id_of(loaded_store, original)).kind is NoticeKind.SUCCESS
        assert session.text == CORRECTED
        assert len(loaded_store) == 0

    def test_phrase_moved_by_user_edit(self, session, loaded_store, sample_text):
        session.update_text("Well. " + sample_text)
        notice = session.accept(_id_of(loaded_store, "buyed"))
        assert notice.kind is NoticeKind.SUCCESS
        assert "bought some apples" in session.text

    def test_phrase_gone_is_stale(self, session, loaded_store, sample_text):
        session.update_text(sample_text.replace("goed", "walked"))
        target = _id_of(loaded_store, "goed")

        notice = session.accept(target)

        assert notice == STALE_NOTICE
        assert "walked" in session.text
        assert loaded_store.get(target) is None

    def test_word_growth_from_accepts_goes_stale(self, store, raw_suggestion):
        text = "The dog wagged its tail, its ears and its paws while its owner laughed."
        raw = [
            raw_suggestion("its", "it is", m.start(), type_="grammar")
            for m in re.finditer(r"\bits\b", text)
        ]
        store.begin_analysis(text)
        store.complete_analysis(text, raw)
        session = EditorSession(store, text)
        ids = [s.id for s in store.suggestions]
        assert len(ids) == 4

        for suggestion_id in ids[:3]:
            assert session.accept(suggestion_id).kind is NoticeKind.SUCCESS
        assert store.state is AnalysisState.COMPLETED

        session.accept(ids[3])
        assert store.state is AnalysisState.STALE

    def test_unknown_id(self, session):
        notice = session.accept("suggestion-missing")
        assert notice.kind is NoticeKind.GENERIC_ERROR

    def test_busy(self, session, loaded_store, sample_text):
        target = _id_of(loaded_store, "goed")
        with loaded_store.processing():
            assert session.accept(target) == BUSY_NOTICE
        assert session.text == sample_text
        assert loaded_store.get(target) is not None


class TestReject:
    def test_removes_without_editing(self, session, loaded_store, sample_text):
        notice = session.reject(_id_of(loaded_store, "mines"))
        assert notice.kind is NoticeKind.INFO
        assert notice.title == "Suggestion rejected"
        assert session.text == sample_text
        assert len(loaded_store) == 2


class TestAcceptAll:
    def test_applies_everything(self, session, loaded_store):
        notice = session.accept_all()

        assert notice.kind is NoticeKind.SUCCESS
        assert notice.description == "Applied 3 suggestions successfully"
        assert session.text == CORRECTED
        assert len(loaded_store) == 0
        assert loaded_store.state is AnalysisState.IDLE

    def test_nothing_to_apply(self, store, sample_text):
        assert EditorSession(store, sample_text).accept_all() is None

    def test_stale_batch(self, loaded_store, sample_raw_suggestions):
        text = "An entirely rewritten paragraph with none of the old mistakes in it."
        session = EditorSession(loaded_store, text)

        notice = session.accept_all()

        assert notice.kind is NoticeKind.STALE_SUGGESTION
        assert notice.title == "No suggestions applied"
        assert session.text == text
        assert loaded_store.state is AnalysisState.STALE
        loaded_store.tick()
        assert len(loaded_store) == 0

    def test_busy(self, session, loaded_store, sample_text):
        with loaded_store.processing():
            assert session.accept_all() == BUSY_NOTICE
        assert session.text == sample_text

    def test_reschedules_analysis(self, loaded_store, sample_text):
        scheduler = MagicMock(spec=AnalysisScheduler)
        session = EditorSession(loaded_store, sample_text, scheduler=scheduler)
        session.accept_all()
        scheduler.schedule.assert_called_once_with(CORRECTED)


class TestUpdateText:
    def test_small_edit_keeps_suggestions(self, session, loaded_store, sample_text):
        session.update_text(sample_text + " Really.")
        assert loaded_store.state is AnalysisState.COMPLETED

    def test_large_edit_goes_stale(self, session, loaded_store, sample_text):
        session.update_text(sample_text + " It was a long and tiring day.")
        assert loaded_store.state is AnalysisState.STALE

    def test_schedules_analysis(self, store):
        scheduler = MagicMock(spec=AnalysisScheduler)
        session = EditorSession(store, scheduler=scheduler)
        session.update_text("Some new text")
        assert session.text == "Some new text"
        scheduler.schedule.assert_called_once_with("Some new text")
