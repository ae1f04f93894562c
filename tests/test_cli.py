"""
Tests for configuration loading and the scenario replay CLI.
"""
import json
import textwrap

import pytest

from requests_list.bus import NotificationBus, NotificationType
from requests_list.cli import apply_event, load_scenario, main, replay
from requests_list.config import CONFIG_ENV, Config
from requests_list.errors import ConfigError
from requests_list.memory_store import InMemoryRecordStore


def write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(textwrap.dedent(content))
    return path


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestConfig:

    def test_defaults_when_file_missing(self, tmp_path):
        cfg = Config.load(str(tmp_path / "missing.yaml"))
        assert cfg.saved_kinds == ["saved", "saved-requests"]
        assert cfg.log_level == "INFO"

    def test_loads_yaml_and_ignores_unknown_keys(self, tmp_path):
        path = write(tmp_path, "config.yaml", """
            saved_kinds: [saved, bookmark]
            log_level: DEBUG
            unrelated: true
        """)
        cfg = Config.load(str(path))
        assert cfg.saved_kinds == ["saved", "bookmark"]
        assert cfg.log_level == "DEBUG"

    def test_env_variable_path(self, tmp_path, monkeypatch):
        path = write(tmp_path, "env.yaml", "log_level: WARNING\n")
        monkeypatch.setenv(CONFIG_ENV, str(path))
        assert Config.load().log_level == "WARNING"

    def test_non_mapping_is_config_error(self, tmp_path):
        path = write(tmp_path, "bad.yaml", "- just\n- a list\n")
        with pytest.raises(ConfigError):
            Config.load(str(path))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Replay
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


PROJECT_SCENARIO = """
    context: {mode: project, project_id: p1}
    project: {_id: p1, requests: [a, b]}
    requests:
      - {_id: a, name: Login, projects: [p1]}
      - {_id: b, name: Logout, projects: [p1]}
    events:
      - {type: project-changed, project: {_id: p1, requests: [b, a]}}
      - {type: record-changed, kind: saved, request: {_id: c, projects: [p1]}}
      - {type: record-deleted, id: a}
"""


def test_replay_project_scenario(tmp_path, capsys):
    path = write(tmp_path, "scenario.yaml", PROJECT_SCENARIO)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out.split() == ["b", "c"]


def test_replay_history_scenario_json(tmp_path, capsys):
    path = write(tmp_path, "history.yaml", """
        context: {mode: history}
        requests:
          - {_id: "1", type: history, hasHeader: true, header: Today}
          - {_id: "2", type: history}
        events:
          - {type: record-deleted, id: "1"}
    """)
    assert main([str(path), "--json"]) == 0
    records = json.loads(capsys.readouterr().out)
    assert [r["_id"] for r in records] == ["2"]
    assert records[0]["hasHeader"] is True
    assert records[0]["header"] == "Today"


def test_replay_saved_scenario_uses_config_kinds(tmp_path):
    cfg = Config(saved_kinds=["bookmark"])
    scenario = {
        "context": {"mode": "saved"},
        "events": [
            {"type": "record-changed", "request": {"_id": "x", "type": "saved"}},
            {"type": "record-changed", "request": {"_id": "y", "type": "bookmark"}},
        ],
    }
    controller = replay(scenario, cfg)
    assert [r.id for r in controller.requests] == ["y"]
    assert not controller.attached


def test_missing_context_exits_with_error(tmp_path, capsys):
    path = write(tmp_path, "empty.yaml", "events: []\n")
    assert main([str(path)]) == 2
    assert "no context" in capsys.readouterr().err


def test_project_scenario_without_project_id_exits_with_error(tmp_path, capsys):
    path = write(tmp_path, "bad.yaml", "context: {mode: project}\n")
    assert main([str(path)]) == 2
    assert "project_id" in capsys.readouterr().err


def test_unknown_event_type_rejected(bus):
    with pytest.raises(ConfigError):
        apply_event(InMemoryRecordStore(bus), {"type": "navigate"})


def test_replayed_delete_updates_store_project_order(tmp_path):
    path = write(tmp_path, "scenario.yaml", PROJECT_SCENARIO)
    store = InMemoryRecordStore(NotificationBus())
    controller = replay(load_scenario(str(path)), Config(), store=store)

    assert [r.id for r in controller.requests] == ["b", "c"]
    assert "a" not in store.requests
    assert store.projects["p1"].ordered_request_ids == ["b"]
    assert "c" in store.requests
    assert store.bus.subscriber_count(NotificationType.RECORD_DELETED) == 0


def test_delete_of_unknown_id_changes_nothing(tmp_path, capsys):
    path = write(tmp_path, "scenario.yaml", """
        context: {mode: saved}
        requests:
          - {_id: a, type: saved}
        events:
          - {type: record-deleted, id: zzz}
    """)
    assert main([str(path)]) == 0
    assert capsys.readouterr().out.split() == ["a"]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Malformed scenarios
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestMalformedScenario:

    def run(self, tmp_path, capsys, content):
        path = write(tmp_path, "bad.yaml", content)
        code = main([str(path)])
        return code, capsys.readouterr().err

    def test_event_without_id(self, tmp_path, capsys):
        code, err = self.run(tmp_path, capsys, """
            context: {mode: saved}
            events:
              - {type: record-deleted}
        """)
        assert code == 2
        assert err.startswith("Error:")
        assert "id" in err

    def test_request_without_id(self, tmp_path, capsys):
        code, err = self.run(tmp_path, capsys, """
            context: {mode: saved}
            requests:
              - {name: nameless}
        """)
        assert code == 2
        assert "_id" in err

    def test_duplicate_request_ids(self, tmp_path, capsys):
        code, err = self.run(tmp_path, capsys, """
            context: {mode: saved}
            requests:
              - {_id: a}
              - {_id: a}
        """)
        assert code == 2
        assert "already in the list" in err

    def test_invalid_yaml(self, tmp_path, capsys):
        code, err = self.run(tmp_path, capsys, "context: [unclosed\n")
        assert code == 2
        assert err.startswith("Error:")

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.yaml")]) == 2
        assert capsys.readouterr().err.startswith("Error:")
