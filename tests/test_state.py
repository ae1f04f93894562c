"""
Tests for ListState: context validation, lookups and mutations.
"""
import pytest

from requests_list.errors import ConfigError, DuplicateRequestError
from requests_list.schema import ListContext, ListMode, Project, Request
from requests_list.state import ListState


def make_state(mode="saved", project_id=None):
    return ListState(ListContext(mode=mode, project_id=project_id))


class TestConstruction:

    def test_starts_uninitialized(self):
        state = make_state()
        assert state.mode == ListMode.SAVED
        assert state.requests is None
        assert not state.is_loaded
        assert not state.has_requests
        assert len(state) == 0

    def test_missing_mode_fails_fast(self):
        with pytest.raises(ConfigError):
            ListState(ListContext(mode=None))

    def test_project_mode_without_id_fails_fast(self):
        with pytest.raises(ConfigError):
            make_state("project")

    def test_project_mode(self):
        state = make_state("project", "p1")
        assert state.project_id == "p1"
        assert state.project is None


class TestLookups:

    def setup_method(self):
        self.state = make_state()
        self.state.load([Request(id="a"), Request(id="b"), Request(id="c")])

    def test_find(self):
        assert self.state.find("b") == 1
        assert self.state.find("zzz") is None

    def test_ids(self):
        assert self.state.ids() == ["a", "b", "c"]

    def test_find_on_uninitialized_list(self):
        assert make_state().find("a") is None


class TestMutations:

    def setup_method(self):
        self.state = make_state()
        self.state.load([Request(id="a"), Request(id="b")])

    def test_insert_at(self):
        self.state.insert_at(1, Request(id="x"))
        assert self.state.ids() == ["a", "x", "b"]

    def test_insert_duplicate_is_rejected(self):
        with pytest.raises(DuplicateRequestError):
            self.state.insert_at(0, Request(id="b"))
        assert self.state.ids() == ["a", "b"]

    def test_insert_into_uninitialized_list(self):
        state = make_state()
        state.append(Request(id="a"))
        assert state.ids() == ["a"]

    def test_prepend_and_append(self):
        self.state.prepend(Request(id="first"))
        self.state.append(Request(id="last"))
        assert self.state.ids() == ["first", "a", "b", "last"]

    def test_replace_at_keeps_position(self):
        self.state.replace_at(0, Request(id="a", name="Renamed"))
        assert self.state.ids() == ["a", "b"]
        assert self.state.requests[0].name == "Renamed"

    def test_replace_with_id_from_other_position_is_rejected(self):
        with pytest.raises(DuplicateRequestError):
            self.state.replace_at(0, Request(id="b"))

    def test_remove_at(self):
        removed = self.state.remove_at(0)
        assert removed.id == "a"
        assert self.state.ids() == ["b"]

    def test_load_rejects_duplicates_without_mutating(self):
        with pytest.raises(DuplicateRequestError):
            self.state.load([Request(id="x"), Request(id="x")])
        assert self.state.ids() == ["a", "b"]

    def test_move(self):
        self.state.append(Request(id="c"))
        self.state.move(0, 2)
        assert self.state.ids() == ["b", "c", "a"]

    def test_move_out_of_range_leaves_list_alone(self):
        with pytest.raises(IndexError):
            self.state.move(5, 0)
        assert self.state.ids() == ["a", "b"]

    def test_set_project(self):
        state = make_state("project", "p1")
        project = Project(id="p1", ordered_request_ids=["a"])
        state.set_project(project)
        assert state.project is project
