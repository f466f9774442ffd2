"""Prompt template parsing, substitution, and the variable editor."""

from __future__ import annotations

import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from tfe.errors import PromptParseError
from tfe.prompts.parser import (
    classify_source,
    context_variables,
    count_occurrences,
    extract_variables,
    parse_prompt_file,
    parse_prompt_text,
    render_template,
)
from tfe.prompts.render import PromptEditSession, header_lines, render_edit_body, variable_category
from tfe.ui_theme import PLAIN_THEME

PROMPTY = """---
name: Review
description: Review a file
inputs:
  file: {type: string}
---
Review {{file}} in {{project}}.
Again: {{file}}
"""


class VariableTests(unittest.TestCase):
    def test_variables_are_unique_in_first_appearance_order(self) -> None:
        body = "{{b}} {{a}} {{b}} {{not valid}} {{C_1}}"
        self.assertEqual(extract_variables(body), ["b", "a", "C_1"])
        self.assertEqual(count_occurrences(body), {"b": 2, "a": 1, "C_1": 1})

    def test_render_template_matches_case_variants(self) -> None:
        body = "{{date}} {{DATE}} {{Date}} {{other}}"
        self.assertEqual(render_template(body, {"date": "2026-01-02"}), "2026-01-02 2026-01-02 2026-01-02 {{other}}")

    def test_variable_categories(self) -> None:
        self.assertEqual(variable_category("DATE"), "datetime")
        self.assertEqual(variable_category("filename"), "path")
        self.assertEqual(variable_category("topic"), "other")

    def test_context_variables(self) -> None:
        moment = datetime(2026, 3, 4, 5, 6)
        values = context_variables(Path("/work/proj/main.py"), Path("/work/proj"), now=moment)
        self.assertEqual(values["project"], "proj")
        self.assertEqual(values["DATE"], "2026-03-04")
        self.assertEqual(values["TIME"], "05:06")
        self.assertEqual(values["filename"], "main.py")
        self.assertNotIn("file", context_variables(None, Path("/work/proj"), now=moment))


class ParseTests(unittest.TestCase):
    def test_prompty_frontmatter(self) -> None:
        template = parse_prompt_text(PROMPTY, Path("/tmp/review.prompty"), home=Path("/home/u"))
        self.assertEqual(template.name, "Review")
        self.assertEqual(template.description, "Review a file")
        self.assertEqual(template.variables, ["file", "project"])
        self.assertEqual(template.source, "local")
        self.assertIsInstance(template.inputs, dict)
        self.assertTrue(template.body.startswith("Review {{file}}"))

    def test_prompty_without_markers_is_rejected(self) -> None:
        with self.assertRaises(PromptParseError):
            parse_prompt_text("just text", Path("/tmp/bad.prompty"))

    def test_prompty_with_broken_yaml_is_rejected(self) -> None:
        with self.assertRaises(PromptParseError):
            parse_prompt_text("---\nname: [oops\n---\nbody", Path("/tmp/bad.prompty"))

    def test_yaml_template_key(self) -> None:
        raw = "name: Greeter\ndescription: says hi\ntemplate: Hello {{NAME}}\n"
        template = parse_prompt_text(raw, Path("/tmp/greet.yaml"))
        self.assertEqual(template.name, "Greeter")
        self.assertEqual(template.body, "Hello {{NAME}}")

    def test_markdown_without_frontmatter_uses_file_stem(self) -> None:
        template = parse_prompt_text("Fix {{issue}}", Path("/repo/.claude/commands/fix.md"))
        self.assertEqual(template.name, "fix")
        self.assertEqual(template.source, "command")
        self.assertEqual(template.variables, ["issue"])

    def test_sources(self) -> None:
        home = Path("/home/u")
        self.assertEqual(classify_source(home / ".prompts" / "a.md", home), "global")
        self.assertEqual(classify_source(Path("/r/.claude/agents/x.md"), home), "agent")
        self.assertEqual(classify_source(Path("/r/.claude/skills/s/SKILL.md"), home), "skill")
        self.assertEqual(classify_source(Path("/r/notes.prompty"), home), "local")

    def test_parse_file_reads_disk(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "review.prompty"
            path.write_text(PROMPTY, encoding="utf-8")
            template = parse_prompt_file(path, home=Path(tmp) / "home")
        self.assertEqual(template.name, "Review")

    def test_missing_file_raises_parse_error(self) -> None:
        with self.assertRaises(PromptParseError):
            parse_prompt_file(Path("/nonexistent/dir/x.prompty"))


class EditSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.template = parse_prompt_text(PROMPTY, Path("/tmp/review.prompty"))

    def test_start_prefills_from_defaults(self) -> None:
        session = PromptEditSession.start(self.template, {"project": "tfe", "DATE": "x"})
        self.assertEqual(session.values, {"project": "tfe"})
        self.assertEqual(session.focused_name, "file")

    def test_focus_wraps_both_ways(self) -> None:
        session = PromptEditSession.start(self.template, {})
        session.focus_previous()
        self.assertEqual(session.focused_name, "project")
        session.focus_next()
        self.assertEqual(session.focused_name, "file")

    def test_typing_and_backspace(self) -> None:
        session = PromptEditSession.start(self.template, {})
        session.insert("ab")
        session.insert("c")
        session.backspace()
        self.assertEqual(session.current_value(), "ab")
        session.clear_focused()
        self.assertEqual(session.current_value(), "")
        session.backspace()
        self.assertEqual(session.current_value(), "")

    def test_edit_body_shows_values_without_braces(self) -> None:
        body = render_edit_body("Hi {{name}} from {{place}}", {"name": "Ann"}, None, PLAIN_THEME)
        self.assertEqual(body, "Hi Ann from place")

    def test_edit_body_marks_every_focused_occurrence(self) -> None:
        body = render_edit_body("{{x}} and {{X}}", {}, "x", PLAIN_THEME)
        self.assertEqual(body.count(PLAIN_THEME.prompt_focused), 2)

    def test_header_lists_variable_counts(self) -> None:
        lines = header_lines(self.template)
        self.assertEqual(lines[0], "Prompt: Review")
        self.assertIn("Variables: file (2), project (1)", lines)


if __name__ == "__main__":
    unittest.main()
