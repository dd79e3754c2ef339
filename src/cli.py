"""Command-line entrypoint: understand one query and print the matching employees.

Usage:
    python -m src.cli "emails for rick and summer hired before 2024 in engineering"
    python -m src.cli "morty smith" --resolve-only --employees data/employees.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import load_settings
from src.directory.load_json import DirectoryLoadError
from src.query.executor import execute_query, project_employee

logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="src.cli", description=__doc__.splitlines()[0])
    parser.add_argument("query", help="free-text question about employees")
    parser.add_argument("--employees", help="employee directory JSON (overrides EMPLOYEES_PATH)")
    parser.add_argument(
        "--resolve-only",
        action="store_true",
        help="print the fuzzy name matches instead of executing the query",
    )
    return parser.parse_args(argv)


def _spec_payload(spec: Any) -> dict[str, Any]:
    payload = spec.model_dump(mode="json")
    payload["slots"]["markers"] = sorted(payload["slots"]["markers"])
    payload["slots"]["entity_ids"] = sorted(payload["slots"]["entity_ids"])
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    if args.employees:
        settings = settings.model_copy(update={"employees_path": args.employees})

    try:
        app = create_app(settings)
    except (DirectoryLoadError, RuntimeError) as exc:
        logger.error("startup failed error=%s", exc)
        return 2

    if args.resolve_only:
        matches = app.pipeline.resolve_entities(args.query)
        payload: Any = [{**asdict(m), "kind": m.kind.name} for m in matches]
    else:
        spec = app.pipeline.understand(args.query)
        payload = {
            "query_spec": _spec_payload(spec),
            "employees": [
                project_employee(e, spec.intent) for e in execute_query(spec, app.employees)
            ],
        }

    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
