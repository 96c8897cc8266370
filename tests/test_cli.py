import logging
from pathlib import Path

from click.testing import CliRunner

from hbsbuild.cli.interface import main_cli_group


def _write_site(proj_dir: Path):
    (proj_dir / "src").mkdir()
    (proj_dir / "partials").mkdir()
    (proj_dir / "data").mkdir()
    (proj_dir / "src" / "index.hbs").write_text("<h1>{{site.title}}</h1>{{> footer}}")
    (proj_dir / "partials" / "footer.hbs").write_text("<footer>{{site.owner}}</footer>")
    (proj_dir / "data" / "site.json").write_text('{"title": "Hi", "owner": "Ada"}')


def test_cli_build_from_config_file():
    """Builds a site from hbsbuild.toml in the working directory."""
    runner = CliRunner()
    with runner.isolated_filesystem() as td:
        proj_dir = Path(td)
        _write_site(proj_dir)
        (proj_dir / "hbsbuild.toml").write_text(
            'entry = "src/*.hbs"\n'
            'output = "dist/[name].html"\n'
            'data = "data/*.json"\n'
            'output_path = "dist"\n'
            '\n[partials]\nfooter = "partials/footer.hbs"\n'
        )

        result = runner.invoke(main_cli_group, ["build"], catch_exceptions=False)

        assert result.exit_code == 0
        assert (proj_dir / "dist" / "index.html").read_text(encoding="utf-8") == "<h1>Hi</h1><footer>Ada</footer>"
        assert "index.html" in result.output


def test_cli_options_override_config():
    runner = CliRunner()
    with runner.isolated_filesystem() as td:
        proj_dir = Path(td)
        _write_site(proj_dir)
        (proj_dir / "src" / "plain.hbs").write_text("plain")

        result = runner.invoke(
            main_cli_group,
            ["build", "--entry", "src/plain.hbs", "--output", "out/[name].txt", "--output-path", "out"],
            catch_exceptions=False,
        )

        assert result.exit_code == 0
        assert (proj_dir / "out" / "plain.txt").read_text(encoding="utf-8") == "plain"
        assert not (proj_dir / "out" / "index.txt").exists()


def test_cli_missing_entry_is_a_config_error():
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(main_cli_group, ["build"])

        assert result.exit_code == 1
        assert "entry" in result.output


def test_cli_version():
    result = CliRunner().invoke(main_cli_group, ["--version"])
    assert result.exit_code == 0
    assert "hbsbuild" in result.output


def test_cli_double_verbose_keeps_debug_level():
    runner = CliRunner()
    with runner.isolated_filesystem() as td:
        proj_dir = Path(td)
        _write_site(proj_dir)
        (proj_dir / "src" / "plain.hbs").write_text("plain")

        result = runner.invoke(
            main_cli_group,
            ["build", "-vv", "--entry", "src/plain.hbs"],
            catch_exceptions=False,
        )

        assert result.exit_code == 0
        assert logging.getLogger("hbsbuild").level == logging.DEBUG
