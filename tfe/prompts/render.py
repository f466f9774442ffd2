"""Inline variable styling for prompt previews and the variable editor."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ui_theme import UITheme
from .parser import SOURCE_LABELS, VARIABLE_RE, PromptTemplate, count_occurrences, lookup_value

_PATH_HINTS = ("file", "path")
_DATETIME_NAMES = {"date", "time"}


def variable_category(name: str) -> str:
    lowered = name.lower()
    if lowered in _DATETIME_NAMES:
        return "datetime"
    if any(hint in lowered for hint in _PATH_HINTS):
        return "path"
    return "other"


def _style_for_category(category: str, theme: UITheme) -> str:
    if category == "datetime":
        return theme.prompt_var_datetime
    if category == "path":
        return theme.prompt_var_path
    return theme.prompt_var_other


def _styled(text: str, style: str, reset: str) -> str:
    """Wrap each line of ``text`` separately so styles never span newlines."""
    if not style:
        return text
    return "\n".join(f"{style}{part}{reset}" if part else part for part in text.split("\n"))


def highlight_variables(body: str, theme: UITheme) -> str:
    """Color ``{{NAME}}`` placeholders by category, keeping the braces."""

    def replace(match) -> str:
        style = _style_for_category(variable_category(match.group(1)), theme)
        return _styled(match.group(0), style, theme.reset)

    return VARIABLE_RE.sub(replace, body)


def render_edit_body(
    body: str,
    values: dict[str, str],
    focused_name: str | None,
    theme: UITheme,
) -> str:
    """Render the body with braces removed for interactive filling.

    Filled variables show their value, unfilled ones their name; every
    occurrence of the focused variable also gets the focus background.
    """
    focused_key = focused_name.lower() if focused_name else None

    def replace(match) -> str:
        name = match.group(1)
        value = lookup_value(values, name)
        if name.lower() == focused_key:
            style = theme.prompt_focused
        elif value:
            style = theme.prompt_filled
        else:
            style = theme.prompt_unfilled
        return _styled(value if value else name, style, theme.reset)

    return VARIABLE_RE.sub(replace, body)


def header_lines(template: PromptTemplate) -> list[str]:
    """Summary rows shown above a prompt body."""
    lines = [f"Prompt: {template.name}"]
    if template.description:
        lines.append(f"Description: {template.description}")
    lines.append(f"Source: {SOURCE_LABELS.get(template.source, template.source)}")
    if template.variables:
        counts = count_occurrences(template.body)
        listed = ", ".join(f"{name} ({counts.get(name, 0)})" for name in template.variables)
        lines.append(f"Variables: {listed}")
    lines.append("─" * 40)
    return lines


@dataclass
class PromptEditSession:
    """Filled values and focus for the inline variable editor.

    Values are keyed by the lower-case variable name.
    """

    variables: list[str]
    values: dict[str, str] = field(default_factory=dict)
    focused: int = 0

    @classmethod
    def start(cls, template: PromptTemplate, defaults: dict[str, str]) -> PromptEditSession:
        session = cls(variables=list(template.variables))
        for name in template.variables:
            value = lookup_value(defaults, name)
            if value:
                session.values[name.lower()] = value
        return session

    @property
    def focused_name(self) -> str | None:
        if not self.variables:
            return None
        return self.variables[self.focused % len(self.variables)]

    def focus_next(self) -> None:
        if self.variables:
            self.focused = (self.focused + 1) % len(self.variables)

    def focus_previous(self) -> None:
        if self.variables:
            self.focused = (self.focused - 1) % len(self.variables)

    def _key(self) -> str | None:
        name = self.focused_name
        return name.lower() if name else None

    def insert(self, text: str) -> None:
        key = self._key()
        if key is not None:
            self.values[key] = self.values.get(key, "") + text

    def backspace(self) -> None:
        key = self._key()
        if key is not None and self.values.get(key):
            self.values[key] = self.values[key][:-1]

    def clear_focused(self) -> None:
        key = self._key()
        if key is not None:
            self.values.pop(key, None)

    def current_value(self) -> str:
        key = self._key()
        return self.values.get(key, "") if key else ""

