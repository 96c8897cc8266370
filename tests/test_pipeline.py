"""Tests for the pipeline orchestration and its host integration."""
import os
import time
from pathlib import Path

import pytest

from hbsbuild import (
    Compilation,
    HandlebarsPipeline,
    LifecycleHooks,
    PageData,
    PluginConfig,
    StandaloneBuild,
)
from hbsbuild.core.host import BuildHooks


def site_config(**overrides) -> PluginConfig:
    options = dict(
        entry="src/*.hbs",
        output="dist/[name].html",
        data="data/*.json",
        partials={"footer": "partials/footer.hbs"},
    )
    options.update(overrides)
    return PluginConfig(**options)


def touch_in_future(file_path: Path, seconds: float = 100.0) -> float:
    future = time.time() + seconds
    os.utime(file_path, (future, future))
    return future


class TestHandlebarsPipeline:
    def test_setup_hook_runs_once_with_registry(self, site_project: Path):
        seen = []
        pipeline = HandlebarsPipeline(site_config(hooks=LifecycleHooks(on_before_setup=seen.append)))
        assert seen == [pipeline.registry]

    def test_separate_pipelines_do_not_share_partials(self, site_project: Path):
        first = HandlebarsPipeline(site_config())
        second = HandlebarsPipeline(site_config())
        first.load_partials()
        assert first.registry.partials.has("footer")
        assert not second.registry.partials.has("footer")

    @pytest.mark.asyncio
    async def test_make_then_emit(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config())
        compilation = Compilation(output_path=str(site_project / "dist"))

        assert await pipeline.compile(compilation) is True
        pipeline.emit_dependencies(compilation)

        assert sorted(compilation.assets) == ["about.html", "index.html"]
        assert compilation.assets["index.html"].source() == "<h1>Hi</h1><footer>Ada</footer>"
        assert str(site_project / "src" / "index.hbs") in compilation.file_dependencies
        assert str(site_project / "partials" / "footer.hbs") in compilation.file_dependencies
        assert str(site_project / "data" / "site.json") in compilation.file_dependencies

    @pytest.mark.asyncio
    async def test_untracked_change_skips_pass(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config())
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))
        outputs_before = dict(pipeline.pending_assets)

        unrelated = site_project / "app.js"
        unrelated.write_text("console.log(1)")
        compilation = Compilation(
            output_path=str(site_project / "dist"),
            file_timestamps={str(unrelated): touch_in_future(unrelated)},
        )

        assert await pipeline.compile(compilation) is False
        pipeline.emit_dependencies(compilation)
        # the previous pass's outputs are still handed to the host
        assert compilation.assets == outputs_before

    @pytest.mark.asyncio
    async def test_tracked_change_recompiles_with_fresh_data(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config())
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))

        data_file = site_project / "data" / "site.json"
        data_file.write_text('{"title": "Changed", "owner": "Ada"}')
        compilation = Compilation(
            output_path=str(site_project / "dist"),
            file_timestamps={str(data_file): touch_in_future(data_file)},
        )

        assert await pipeline.compile(compilation) is True
        assert pipeline.pending_assets["index.html"].source() == "<h1>Changed</h1><footer>Ada</footer>"

    @pytest.mark.asyncio
    async def test_edited_partial_is_picked_up(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config())
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))

        (site_project / "partials" / "footer.hbs").write_text("<footer>v2</footer>")
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))

        assert pipeline.pending_assets["index.html"].source() == "<h1>Hi</h1><footer>v2</footer>"

    @pytest.mark.asyncio
    async def test_before_add_partials_can_replace_map(self, site_project: Path):
        def only_inline(registry, partials):
            registry.register_partial("footer", "<footer>inline</footer>")
            return {"unused": "partials/footer.hbs"}

        pipeline = HandlebarsPipeline(site_config(hooks=LifecycleHooks(on_before_add_partials=only_inline)))
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))

        assert pipeline.registry.partials.has("unused")
        assert pipeline.pending_assets["index.html"].source() == "<h1>Hi</h1><footer>inline</footer>"

    @pytest.mark.asyncio
    async def test_before_save_result_is_emitted(self, site_project: Path):
        hooks = LifecycleHooks(on_before_save=lambda registry, result, target: result.replace("Hi", "Bye"))
        pipeline = HandlebarsPipeline(site_config(hooks=hooks))
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))
        assert pipeline.pending_assets["about.html"].source() == "<p>About Bye</p>"

    @pytest.mark.asyncio
    async def test_outputs_outside_build_directory_are_written(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config(output="public/[name].html"))
        await pipeline.compile(Compilation(output_path=str(site_project / "dist")))

        assert pipeline.pending_assets == {}
        assert (site_project / "public" / "about.html").read_text(encoding="utf-8") == "<p>About Hi</p>"

    def test_helper_files_are_tracked(self, site_project: Path):
        (site_project / "helpers").mkdir()
        (site_project / "helpers" / "shout.py").write_text("def shout(this, value):\n    return str(value).upper()\n")

        pipeline = HandlebarsPipeline(site_config(helpers={"project": "helpers/*.py"}))

        assert pipeline.registry.helpers.has("shout")
        assert str(site_project / "helpers" / "shout.py") in pipeline.ledger


class TestHostIntegration:
    def test_apply_taps_make_and_emit(self, site_project: Path):
        class Host:
            hooks = BuildHooks()

        pipeline = HandlebarsPipeline(site_config())
        pipeline.apply(Host)
        assert Host.hooks.taps("make") == ["HandlebarsPipeline"]
        assert Host.hooks.taps("emit") == ["HandlebarsPipeline"]
        assert Host.hooks.taps("page_generated") == []

    def test_standalone_build_writes_assets(self, site_project: Path):
        build = StandaloneBuild(site_project / "dist", plugins=[HandlebarsPipeline(site_config())])

        result = build.run()

        assert [p.name for p in result.written_files] == ["about.html", "index.html"]
        assert (site_project / "dist" / "index.html").read_text(encoding="utf-8") == "<h1>Hi</h1><footer>Ada</footer>"
        assert str(site_project / "src" / "about.hbs") in result.file_dependencies

    def test_second_pass_without_changes_output_is_identical(self, site_project: Path):
        build = StandaloneBuild(site_project / "dist", plugins=[HandlebarsPipeline(site_config())])
        build.run()
        first = (site_project / "dist" / "about.html").read_bytes()

        build.run()

        assert (site_project / "dist" / "about.html").read_bytes() == first

    def test_companion_pages_become_partials(self, site_project: Path):
        pipeline = HandlebarsPipeline(
            site_config(html_pages={"enabled": True, "prefix": "pages"})
        )
        build = StandaloneBuild(site_project / "dist", plugins=[pipeline])
        assert build.hooks.taps("make") == []

        page = PageData(output_name="dist/landing.hbs", html="<main>{{site.title}}</main>",
                        template="html-loader!handlebars-loader!src/landing.hbs")
        result = build.run(pages=[page])

        assert pipeline.registry.partials.has("pages/landing")
        assert str(site_project / "src" / "landing.hbs") in pipeline.ledger
        assert [p.name for p in result.written_files] == ["about.html", "index.html"]

    def test_companion_page_without_template_is_not_fatal(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config(html_pages={"enabled": True}))
        ledger_size = len(pipeline.ledger)

        pipeline.register_page(PageData(output_name="index.html", html="<p>x</p>", template=None))

        assert pipeline.registry.partials.has("html/index.html")
        assert len(pipeline.ledger) == ledger_size

    def test_companion_page_with_empty_loader_path_is_not_tracked(self, site_project: Path):
        pipeline = HandlebarsPipeline(site_config(html_pages={"enabled": True}))
        ledger_size = len(pipeline.ledger)

        pipeline.register_page(PageData(output_name="about.html", html="<p>y</p>", template="html-loader!"))

        assert pipeline.registry.partials.has("html/about.html")
        assert len(pipeline.ledger) == ledger_size
