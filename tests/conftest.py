"""Shared fixtures for hbsbuild tests."""
from pathlib import Path

import pytest


@pytest.fixture
def site_project(tmp_path: Path, monkeypatch):
    """Creates a small template project and makes it the working directory."""
    proj_dir = tmp_path / "site"
    (proj_dir / "src").mkdir(parents=True)
    (proj_dir / "partials").mkdir()
    (proj_dir / "data").mkdir()

    (proj_dir / "src" / "index.hbs").write_text("<h1>{{site.title}}</h1>{{> footer}}")
    (proj_dir / "src" / "about.hbs").write_text("<p>About {{site.title}}</p>")
    (proj_dir / "partials" / "footer.hbs").write_text("<footer>{{site.owner}}</footer>")
    (proj_dir / "data" / "site.json").write_text('{"title": "Hi", "owner": "Ada"}')

    monkeypatch.chdir(proj_dir)
    return proj_dir
