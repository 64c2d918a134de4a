from pathlib import Path
import jinja2
import pytest
from raml2html.models import ApiDocument, Configuration, SourceDescriptor
from raml2html.renderer.default import DEFAULT_TEMPLATE, TEMPLATES_DIR, DefaultPipeline, get_default_config

FIXTURES = Path(__file__).parent / "fixtures"


def _source(path: Path) -> SourceDescriptor:
    return SourceDescriptor.from_value(path)


class TestDefaultPipeline:
    def test_default_template_pins_package_dir(self):
        pipeline = DefaultPipeline()
        assert pipeline.main_template == DEFAULT_TEMPLATE
        assert pipeline.templates_path == TEMPLATES_DIR
        assert (TEMPLATES_DIR / DEFAULT_TEMPLATE).exists()

    def test_default_template_ignores_templates_path(self, tmp_path):
        pipeline = DefaultPipeline(None, tmp_path)
        assert pipeline.templates_path == TEMPLATES_DIR

    def test_custom_template_without_path_uses_cwd(self):
        pipeline = DefaultPipeline("custom.html")
        assert pipeline.templates_path is None

    def test_environment_filters(self, tmp_path):
        env = DefaultPipeline().create_environment(_source(tmp_path / "api.raml"))
        assert "markdown" in env.filters
        assert "include_code" in env.filters
        assert env.auto_reload is False

    def test_unescapes_quotes(self, tmp_path):
        (tmp_path / "main.html").write_text("<p>&quot;value&quot;</p>")
        pipeline = DefaultPipeline("main.html", tmp_path)
        doc = ApiDocument(data={"title": "x"})
        html = pipeline.load_and_transform(doc, _source(tmp_path / "api.raml"))
        assert html == '<p>"value"</p>'

    def test_escaped_quotes_become_literal(self, tmp_path):
        (tmp_path / "main.html").write_text("<pre>{{ example }}</pre>")
        pipeline = DefaultPipeline("main.html", tmp_path)
        doc = ApiDocument(data={"example": '{"name": "<Ada>"}'})
        html = pipeline.load_and_transform(doc, _source(tmp_path / "api.raml"))
        assert html == '<pre>{"name": "&lt;Ada&gt;"}</pre>'

    def test_non_html_template_is_not_escaped(self, tmp_path):
        (tmp_path / "main.txt").write_text("{{ example }}")
        pipeline = DefaultPipeline("main.txt", tmp_path)
        doc = ApiDocument(data={"example": '"a" & <b>'})
        html = pipeline.load_and_transform(doc, _source(tmp_path / "api.raml"))
        assert html == '"a" & <b>'

    def test_custom_template_gets_document_context(self, tmp_path):
        (tmp_path / "main.html").write_text(
            "{{ title }}|{{ securitySchemeWithName('oauth2').type }}|{{ securitySchemeWithName('x') is none }}"
        )
        pipeline = DefaultPipeline("main.html", tmp_path)
        doc = ApiDocument(data={
            "title": "Demo",
            "securitySchemes": [{"basic": {"type": "Basic"}}, {"oauth2": {"type": "OAuth 2.0"}}],
        })
        html = pipeline.load_and_transform(doc, _source(tmp_path / "api.raml"))
        assert html == "Demo|OAuth 2.0|True"

    def test_include_code_resolves_against_source_dir(self, tmp_path):
        (tmp_path / "main.html").write_text("{{ description | include_code | markdown }}")
        (tmp_path / "foo.txt").write_text("hello")
        pipeline = DefaultPipeline("main.html", tmp_path)
        doc = ApiDocument(data={"description": "#includeCode:foo.txt"})
        html = pipeline.load_and_transform(doc, _source(tmp_path / "api.raml"))
        assert "<pre><code>hello\n</code></pre>" in html

    def test_missing_template_raises(self, tmp_path):
        pipeline = DefaultPipeline("missing.html", tmp_path)
        with pytest.raises(jinja2.TemplateNotFound):
            pipeline.load_and_transform(ApiDocument(data={}), _source(tmp_path / "api.raml"))

    def test_invalid_template_raises(self, tmp_path):
        (tmp_path / "broken.html").write_text("{% for %}")
        pipeline = DefaultPipeline("broken.html", tmp_path)
        with pytest.raises(jinja2.TemplateSyntaxError):
            pipeline.load_and_transform(ApiDocument(data={}), _source(tmp_path / "api.raml"))

    def test_minimal_document_renders(self):
        doc = ApiDocument(data={"title": "Minimal API", "securitySchemes": []})
        html = DefaultPipeline().load_and_transform(doc, _source(FIXTURES / "minimal.raml"))
        assert "Minimal API" in html
        assert doc.security_scheme_with_name("anything") is None


class TestGetDefaultConfig:
    def test_returns_configuration_with_hooks(self):
        config = get_default_config()
        assert isinstance(config, Configuration)
        assert callable(config.process_raml_obj)
        assert callable(config.post_process_html)

    def test_post_process_minifies(self):
        config = get_default_config()
        html = config.post_process_html("<div>\n  <p>a</p>\n</div>")
        assert "\n" not in html
        assert "<p>a</p>" in html
