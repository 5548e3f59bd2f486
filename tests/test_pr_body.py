"""
Tests for PR description rendering.

Rendering is literal token replacement: no escaping, no conditionals.
"""

import pytest

from conftest import MemoryStore
from prflow.errors import TemplateNotFoundError, TemplateReadError
from prflow.github.pr_body import FileStore, TemplateRenderer, build_context, substitute


@pytest.fixture
def context():
    return build_context(
        ticket_id="ABC-123",
        title="Add export",
        description="Exports as CSV",
        url="https://github.com/acme/widgets/compare/main...feature-x",
        username="octocat",
        feature_branch="feature-x",
    )


class TestSubstitute:
    def test_all_placeholders(self, context):
        template = "#ticketId|#title|#description|#url|#username|#featureBranch"

        assert substitute(template, context) == (
            "ABC-123|Add export|Exports as CSV|"
            "https://github.com/acme/widgets/compare/main...feature-x|octocat|feature-x"
        )

    def test_unknown_tokens_left_verbatim(self, context):
        assert substitute("#reviewer and #title", context) == "#reviewer and Add export"

    def test_missing_placeholders_are_fine(self, context):
        assert substitute("static text", context) == "static text"

    def test_repeated_placeholder(self, context):
        assert substitute("#title / #title", context) == "Add export / Add export"

    def test_values_are_not_expanded_again(self, context):
        context["description"] = "see #url and #title"

        assert substitute("#description", context) == "see #url and #title"

    def test_one_field_changes_only_its_spots(self, context):
        template = "A #title B #username C"
        other = dict(context, username="hubot")

        assert substitute(template, context) == "A Add export B octocat C"
        assert substitute(template, other) == "A Add export B hubot C"

    def test_no_escaping(self, context):
        context["description"] = "<b>*bold*</b>"
        assert substitute("#description", context) == "<b>*bold*</b>"


class TestTemplateRenderer:
    def test_render_from_store(self, context):
        renderer = TemplateRenderer(MemoryStore({"tpl.md": "Ticket #ticketId"}))
        assert renderer.render("tpl.md", context) == "Ticket ABC-123"

    def test_missing_template(self, context):
        with pytest.raises(TemplateNotFoundError):
            TemplateRenderer(MemoryStore()).render("tpl.md", context)

    def test_bundled_template_renders(self, context):
        from prflow.config import DEFAULT_TEMPLATE_PATH

        body = TemplateRenderer().render(DEFAULT_TEMPLATE_PATH, context)

        assert "ABC-123" in body
        assert "@octocat" in body
        assert "#" + "title" not in body


class TestFileStore:
    def test_write_creates_parents(self, tmp_path):
        store = FileStore()
        target = tmp_path / "a" / "b" / "body.md"

        store.write(target, "hello")

        assert store.exists(target)
        assert store.read(target) == "hello"

    def test_directory_is_not_a_template(self, tmp_path):
        assert not FileStore().exists(tmp_path)


class TestUnreadableTemplate:
    def test_non_utf8_template(self, tmp_path, context):
        template = tmp_path / "pr_template.md"
        template.write_bytes(b"## #title caf\xe9")

        with pytest.raises(TemplateReadError):
            TemplateRenderer().render(template, context)
