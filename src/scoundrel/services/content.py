from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


@dataclass(frozen=True)
class RuleLine:
    topic: str
    text: str


@dataclass(frozen=True)
class RulesText:
    title: str
    lines: tuple[RuleLine, ...]

    def for_topic(self, topic: str) -> list[str]:
        return [r.text for r in self.lines if r.topic == topic]


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_rules(self) -> RulesText:
        path = self._data_dir / "rules.json"
        schema = _load_schema(self._schema_dir / "rules.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("rules.json must be an object")
        raw_lines = raw.get("rules")
        if not isinstance(raw_lines, list):
            raise ContentError("rules.json.rules must be a list")

        lines: list[RuleLine] = []
        for item in raw_lines:
            if not isinstance(item, dict):
                continue
            lines.append(RuleLine(topic=_require_str(item, "topic"), text=_require_str(item, "text")))
        return RulesText(title=_require_str(raw, "title"), lines=tuple(lines))

    def validate_snapshot(self, snap: Mapping[str, object]) -> None:
        schema = _load_schema(self._schema_dir / "snapshot.schema.json")
        validate_json(dict(snap), schema, context="game snapshot")

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_rules()
        try:
            Draft202012Validator.check_schema(_load_schema(self._schema_dir / "snapshot.schema.json"))
        except SchemaError as e:
            raise ContentError(f"Invalid snapshot schema: {e.message}") from e
