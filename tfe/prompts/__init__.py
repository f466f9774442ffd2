"""Prompt template parsing and rendering."""

from .parser import (
    PromptTemplate,
    classify_source,
    context_variables,
    count_occurrences,
    extract_variables,
    parse_prompt_file,
    parse_prompt_text,
    render_template,
)
from .render import PromptEditSession, header_lines, highlight_variables, render_edit_body

__all__ = [
    "PromptEditSession",
    "PromptTemplate",
    "classify_source",
    "context_variables",
    "count_occurrences",
    "extract_variables",
    "header_lines",
    "highlight_variables",
    "parse_prompt_file",
    "parse_prompt_text",
    "render_edit_body",
    "render_template",
]
