"""Unit tests for argument template rendering."""

import pytest

from secret_files.provision import TemplateError
from secret_files.provision.templates import normalize_template, render_arg, render_args


@pytest.mark.unit
class TestNormalizeTemplate:
    """Tests for dot-prefixed references."""

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("{{ .Path }}", "{{ Path }}"),
            ("{{.Path}}", "{{Path}}"),
            ("{{- .Path -}}", "{{- Path -}}"),
            ("--cfg={{ .Path }}", "--cfg={{ Path }}"),
            ("plain.text", "plain.text"),
            ("{{ Path }}", "{{ Path }}"),
        ],
    )
    def test_normalize(self, template: str, expected: str):
        assert normalize_template(template) == expected


@pytest.mark.unit
class TestRenderArg:
    """Tests for render_arg."""

    @pytest.mark.parametrize(
        "template",
        ["{{ .Path }}", "{{.Path}}", "{{ Path }}", "{{ path }}"],
    )
    def test_placeholder_forms(self, template: str):
        assert render_arg(template, "/tmp/abc") == "/tmp/abc"

    def test_literal_text(self):
        assert render_arg("--verbose", "/tmp/abc") == "--verbose"

    def test_embedded_placeholder(self):
        assert render_arg("--config-file={{ .Path }}", "/tmp/abc") == "--config-file=/tmp/abc"

    @pytest.mark.parametrize(
        "template,expected",
        [
            ("--fmt={#x}", "--fmt={#x}"),
            ("--q={%d}", "--q={%d}"),
            ("{% if x %}y{% endif %}", "{% if x %}y{% endif %}"),
            ("{# note #}{{ .Path }}", "{# note #}/tmp/abc"),
        ],
    )
    def test_only_expressions_are_live(self, template: str, expected: str):
        """Block and comment markers are passed through as literal text."""
        assert render_arg(template, "/tmp/abc") == expected

    def test_path_not_escaped(self):
        """Paths with characters special to HTML are rendered as-is."""
        assert render_arg("{{ .Path }}", "/tmp/a&b<c>") == "/tmp/a&b<c>"

    def test_empty_template(self):
        assert render_arg("", "/tmp/abc") == ""

    def test_syntax_error(self):
        with pytest.raises(TemplateError) as exc_info:
            render_arg("--cfg={{ .Path", "/tmp/abc")
        assert exc_info.value.template == "--cfg={{ .Path"

    def test_undefined_name(self):
        with pytest.raises(TemplateError, match="Dir"):
            render_arg("{{ .Dir }}", "/tmp/abc")


@pytest.mark.unit
class TestRenderArgs:
    """Tests for render_args."""

    def test_order_preserved(self):
        templates = ["--a", "{{ .Path }}", "--b={{ .Path }}"]

        assert render_args(templates, "/p") == ["--a", "/p", "--b=/p"]

    def test_idempotent(self):
        templates = ["--cfg", "{{ .Path }}", "x={{ path }}"]

        assert render_args(templates, "/tmp/abc") == render_args(templates, "/tmp/abc")

    def test_first_failure_raises(self):
        with pytest.raises(TemplateError):
            render_args(["--ok", "{{ .Path ", "{{ .Path }}"], "/tmp/abc")
