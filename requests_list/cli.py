#!/usr/bin/env python3
"""
Replay a store notification scenario against a requests list.

Scenario file (YAML):

    context: {mode: project, project_id: p1}
    project: {_id: p1, requests: [a, b]}
    requests:
      - {_id: a, name: Login, projects: [p1]}
      - {_id: b, name: Logout, projects: [p1]}
    events:
      - {type: project-changed, project: {_id: p1, requests: [b, a]}}
      - {type: record-deleted, id: a}
      - {type: record-changed, kind: saved, request: {_id: c, projects: [p1]}}

Events are committed to an in-memory record store, whose broadcasts reach
the list. Prints the resulting request ids, one per line, or the records
as JSON.
"""
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import yaml

from .bus import NotificationBus, NotificationType
from .config import Config, configure_logging
from .controller import RequestsListController
from .errors import ConfigError, RequestsListError
from .memory_store import InMemoryRecordStore
from .schema import ListContext, Project, Request

logger = logging.getLogger(__name__)

REPLAY_SOURCE = "replay"


def load_scenario(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Scenario {path} must contain a mapping")
    if "context" not in data:
        raise ConfigError(f"Scenario {path} has no context")
    return data


def apply_event(store: InMemoryRecordStore, event: Dict[str, Any]) -> bool:
    """
    Commit one scenario event to the store, which broadcasts it.

    Returns False when the event changed nothing (delete of an unknown id).
    """
    event_type = event.get("type")
    if event_type == NotificationType.RECORD_DELETED:
        return store.delete_request(str(event["id"]), source=REPLAY_SOURCE)
    if event_type == NotificationType.RECORD_CHANGED:
        store.save_request(Request.from_dict(event["request"]), kind=event.get("kind"), source=REPLAY_SOURCE)
        return True
    if event_type == NotificationType.PROJECT_CHANGED:
        store.save_project(Project.from_dict(event["project"]), source=REPLAY_SOURCE)
        return True
    raise ConfigError(f"Unsupported scenario event type: {event_type}")


def replay(
    scenario: Dict[str, Any],
    cfg: Config,
    store: Optional[InMemoryRecordStore] = None,
) -> RequestsListController:
    """Seed a store and a list from the scenario, then commit its events in order."""
    ctx = scenario["context"] or {}
    context = ListContext(mode=ctx.get("mode"), project_id=ctx.get("project_id"))

    bus = store.bus if store is not None else NotificationBus()
    controller = RequestsListController(bus, context, config=cfg)
    if store is None:
        store = InMemoryRecordStore(bus)

    project = Project.from_dict(scenario["project"]) if scenario.get("project") else None
    requests = [Request.from_dict(r) for r in scenario.get("requests") or []]
    for request in requests:
        store.put_request(request)
    if project is not None:
        store.put_project(project)

    if scenario.get("requests") is not None:
        controller.load(requests, project=project)
    elif project is not None:
        controller.state.set_project(project)

    store.attach()
    controller.attach()
    events: List[Dict[str, Any]] = scenario.get("events") or []
    try:
        for i, event in enumerate(events, 1):
            logger.debug(f"[{i}/{len(events)}] {event.get('type')}")
            if not apply_event(store, event):
                logger.debug(f"Event {i} ({event.get('type')}) changed nothing")
    finally:
        controller.detach()
        store.detach()
    return controller


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Replay store notifications against a history, saved or project list"
    )
    ap.add_argument("scenario", help="Path to a scenario YAML file")
    ap.add_argument(
        "--config", default=None,
        help="Path to config.yaml",
    )
    ap.add_argument(
        "--json", action="store_true",
        help="Print the resulting records as JSON instead of ids",
    )
    args = ap.parse_args(argv)

    try:
        cfg = Config.load(args.config)
        configure_logging(cfg)
        controller = replay(load_scenario(args.scenario), cfg)
    except KeyError as e:
        print(f"Error: scenario entry is missing {e}", file=sys.stderr)
        return 2
    except (RequestsListError, ValueError, yaml.YAMLError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    requests = controller.requests or []
    if args.json:
        print(json.dumps([r.to_dict() for r in requests], indent=2))
    else:
        for request in requests:
            print(request.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
