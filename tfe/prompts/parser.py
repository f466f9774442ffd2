"""Prompt template parsing, variable extraction, and substitution.

Three on-disk shapes are understood, selected by extension:

* ``.prompty``: YAML frontmatter between ``---`` markers, then the body.
* ``.yaml`` / ``.yml``: one YAML mapping with ``name``, ``description`` and
  ``template`` keys.
* ``.md`` / ``.markdown`` / ``.txt``: the whole file is the body; optional
  frontmatter may still provide ``name`` and ``description``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import yaml

from ..errors import PromptParseError

VARIABLE_RE = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")
_FRONTMATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*(?:\n|\Z)", re.DOTALL)

PROMPT_SOURCES = ("local", "global", "command", "agent", "skill")
_CLAUDE_SOURCE_DIRS = {"commands": "command", "agents": "agent", "skills": "skill"}

SOURCE_LABELS = {
    "global": "Global Prompt (~/.prompts/)",
    "command": "Project Command (.claude/commands/)",
    "agent": "Project Agent (.claude/agents/)",
    "skill": "Project Skill (.claude/skills/)",
    "local": "Local Prompt",
}


@dataclass
class PromptTemplate:
    name: str
    description: str
    source: str
    raw: str
    body: str
    variables: list[str] = field(default_factory=list)
    inputs: object = None


def extract_variables(body: str) -> list[str]:
    """Return unique ``{{NAME}}`` identifiers in order of first appearance."""
    seen: set[str] = set()
    names: list[str] = []
    for match in VARIABLE_RE.finditer(body):
        name = match.group(1)
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def count_occurrences(body: str) -> dict[str, int]:
    counts: dict[str, int] = {}
    for match in VARIABLE_RE.finditer(body):
        counts[match.group(1)] = counts.get(match.group(1), 0) + 1
    return counts


def classify_source(path: Path, home: Path | None = None) -> str:
    """Classify where a prompt file lives.

    ``global`` under ``~/.prompts``, ``command``/``agent``/``skill`` under the
    matching ``.claude/`` folder, otherwise ``local``.
    """
    absolute = path.absolute()
    prompts_root = (home if home is not None else Path.home()) / ".prompts"
    try:
        absolute.relative_to(prompts_root)
        return "global"
    except ValueError:
        pass
    parts = absolute.parts
    for index, part in enumerate(parts[:-1]):
        if part == ".claude" and index + 1 < len(parts) - 1:
            source = _CLAUDE_SOURCE_DIRS.get(parts[index + 1])
            if source:
                return source
    return "local"


def _load_yaml(text: str, path: Path) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise PromptParseError(f"{path.name}: invalid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PromptParseError(f"{path.name}: expected a YAML mapping")
    return data


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _parse_prompty(raw: str, path: Path) -> tuple[str, str, str, object]:
    parts = raw.split("---", 2)
    if len(parts) < 3:
        raise PromptParseError(f"{path.name}: invalid .prompty format: missing --- markers")
    meta = _load_yaml(parts[1], path)
    return _text(meta.get("name")), _text(meta.get("description")), parts[2].strip(), meta.get("inputs")


def _parse_yaml(raw: str, path: Path) -> tuple[str, str, str, object]:
    meta = _load_yaml(raw, path)
    return _text(meta.get("name")), _text(meta.get("description")), _text(meta.get("template")), None


def _parse_text(raw: str, path: Path) -> tuple[str, str, str, object]:
    match = _FRONTMATTER_RE.match(raw)
    if match is None:
        return path.stem, "", raw, None
    meta = _load_yaml(match.group(1), path)
    return _text(meta.get("name")), _text(meta.get("description")), raw[match.end():].strip(), None


def parse_prompt_text(raw: str, path: Path, home: Path | None = None) -> PromptTemplate:
    """Parse ``raw`` using the format implied by ``path``'s extension."""
    suffix = path.suffix.lower()
    if suffix == ".prompty":
        name, description, body, inputs = _parse_prompty(raw, path)
    elif suffix in {".yaml", ".yml"}:
        name, description, body, inputs = _parse_yaml(raw, path)
    else:
        name, description, body, inputs = _parse_text(raw, path)
    return PromptTemplate(
        name=name or path.stem,
        description=description,
        source=classify_source(path, home),
        raw=raw,
        body=body,
        variables=extract_variables(body),
        inputs=inputs,
    )


def parse_prompt_file(path: Path, home: Path | None = None) -> PromptTemplate:
    try:
        raw = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise PromptParseError(f"{path.name}: {exc}") from exc
    return parse_prompt_text(raw, path, home)


def context_variables(
    selected: Path | None,
    current_dir: Path,
    now: datetime | None = None,
) -> dict[str, str]:
    """Values the explorer contributes automatically to every prompt."""
    moment = now if now is not None else datetime.now()
    values = {
        "project": current_dir.name or str(current_dir),
        "path": str(current_dir),
        "DATE": moment.strftime("%Y-%m-%d"),
        "TIME": moment.strftime("%H:%M"),
    }
    if selected is not None:
        values["file"] = str(selected)
        values["filename"] = selected.name
    return values


def case_variants(name: str) -> tuple[str, ...]:
    variants = [name, name.upper(), name.lower(), name[:1].upper() + name[1:].lower()]
    unique: list[str] = []
    for variant in variants:
        if variant not in unique:
            unique.append(variant)
    return tuple(unique)


def render_template(body: str, values: dict[str, str]) -> str:
    """Substitute ``values`` into ``body``.

    Each name matches its raw spelling and its upper, lower, and title-case
    variants, so ``{"date": ...}`` also fills ``{{DATE}}``.
    """
    result = body
    for name, value in values.items():
        for variant in case_variants(name):
            result = result.replace("{{" + variant + "}}", value)
    return result


def lookup_value(values: dict[str, str], name: str) -> str | None:
    """Case-insensitive lookup matching ``render_template`` semantics."""
    if name in values:
        return values[name]
    lowered = name.lower()
    for key, value in values.items():
        if key.lower() == lowered:
            return value
    return None
