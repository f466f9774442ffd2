"""UI theme definitions and selection helpers.

Themes are ANSI palettes handed explicitly to every renderer. Syntax
highlighting inside previews is a separate pygments concern.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    divider: str
    border: str
    border_focused: str
    title: str
    toolbar: str
    directory: str
    file: str
    symlink: str
    broken_link: str
    claude_context: str
    favorite: str
    header: str
    status: str
    status_hint: str
    message_info: str
    message_error: str
    command_prompt: str
    search_match: str
    search_current: str
    line_number: str
    scrollbar_track: str
    scrollbar_thumb: str
    menu_bar: str
    menu_active: str
    menu_item: str
    menu_selected: str
    menu_disabled: str
    dialog_border: str
    dialog_title: str
    prompt_var_path: str
    prompt_var_datetime: str
    prompt_var_other: str
    prompt_filled: str
    prompt_unfilled: str
    prompt_focused: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    divider="\033[2m",
    border="\033[38;5;240m",
    border_focused="\033[38;5;39m",
    title="\033[1;38;5;39m",
    toolbar="\033[38;5;252m",
    directory="\033[1;34m",
    file="\033[38;5;252m",
    symlink="\033[38;5;51m",
    broken_link="\033[38;5;196m",
    claude_context="\033[38;5;208m",
    favorite="\033[38;5;220m",
    header="\033[1;4;38;5;250m",
    status="\033[38;5;250m",
    status_hint="\033[2;38;5;245m",
    message_info="\033[1;38;5;0;48;5;34m",
    message_error="\033[1;38;5;231;48;5;160m",
    command_prompt="\033[1;38;5;39m",
    search_match="\033[30;48;5;226m",
    search_current="\033[30;48;5;208m",
    line_number="\033[38;5;242m",
    scrollbar_track="\033[38;5;238m",
    scrollbar_thumb="\033[38;5;250m",
    menu_bar="\033[38;5;252;48;5;236m",
    menu_active="\033[30;48;5;39m",
    menu_item="\033[38;5;252;48;5;236m",
    menu_selected="\033[30;48;5;39m",
    menu_disabled="\033[38;5;242;48;5;236m",
    dialog_border="\033[38;5;39m",
    dialog_title="\033[1;38;5;39m",
    prompt_var_path="\033[38;5;39m",
    prompt_var_datetime="\033[38;5;34m",
    prompt_var_other="\033[38;5;220m",
    prompt_filled="\033[38;5;39m",
    prompt_unfilled="\033[38;5;242m",
    prompt_focused="\033[48;5;235m\033[38;5;220m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2;38;5;110m",
    divider="\033[2;38;5;31m",
    border="\033[38;5;24m",
    border_focused="\033[38;5;45m",
    title="\033[1;38;5;45m",
    toolbar="\033[38;5;153m",
    directory="\033[1;38;5;45m",
    file="\033[38;5;252m",
    symlink="\033[38;5;117m",
    broken_link="\033[38;5;203m",
    claude_context="\033[38;5;215m",
    favorite="\033[38;5;229m",
    header="\033[1;4;38;5;153m",
    status="\033[38;5;153m",
    status_hint="\033[2;38;5;110m",
    message_info="\033[1;38;5;0;48;5;37m",
    message_error="\033[1;38;5;231;48;5;124m",
    command_prompt="\033[1;38;5;45m",
    search_match="\033[30;48;5;153m",
    search_current="\033[30;48;5;215m",
    line_number="\033[38;5;24m",
    scrollbar_track="\033[38;5;24m",
    scrollbar_thumb="\033[38;5;117m",
    menu_bar="\033[38;5;153;48;5;17m",
    menu_active="\033[30;48;5;45m",
    menu_item="\033[38;5;153;48;5;17m",
    menu_selected="\033[30;48;5;45m",
    menu_disabled="\033[38;5;60;48;5;17m",
    dialog_border="\033[38;5;45m",
    dialog_title="\033[1;38;5;45m",
    prompt_var_path="\033[38;5;45m",
    prompt_var_datetime="\033[38;5;84m",
    prompt_var_other="\033[38;5;229m",
    prompt_filled="\033[38;5;45m",
    prompt_unfilled="\033[38;5;60m",
    prompt_focused="\033[48;5;17m\033[38;5;229m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    dim="",
    divider="",
    border="",
    border_focused="",
    title="",
    toolbar="",
    directory="",
    file="",
    symlink="",
    broken_link="",
    claude_context="",
    favorite="",
    header="",
    status="",
    status_hint="",
    message_info="",
    message_error="",
    command_prompt="",
    search_match="\033[7m",
    search_current="\033[7m",
    line_number="",
    scrollbar_track="",
    scrollbar_thumb="",
    menu_bar="",
    menu_active="\033[7m",
    menu_item="",
    menu_selected="\033[7m",
    menu_disabled="",
    dialog_border="",
    dialog_title="",
    prompt_var_path="",
    prompt_var_datetime="",
    prompt_var_other="",
    prompt_filled="",
    prompt_unfilled="",
    prompt_focused="\033[7m",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES.get(normalize_theme_name(name), DEFAULT_THEME)


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
