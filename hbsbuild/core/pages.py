# hbsbuild/core/pages.py
"""
Support for a companion page-generation plugin: its generated pages become
partials, and the page source templates become tracked dependencies.
"""
from pathlib import Path
from typing import Optional
import structlog

from hbsbuild.core.host import PageData
from hbsbuild.core.ledger import DependencyLedger
from hbsbuild.core.templating import TemplateRegistry

log = structlog.get_logger(__name__)


def page_partial_name(prefix: str, output_name: str) -> str:
    # "html/index.html"; only a trailing ".hbs" is dropped
    name = Path(output_name).name
    if name.endswith(".hbs"):
        name = name[: -len(".hbs")]
    return f"{prefix}/{name}"


def source_file_from_template(template: Optional[str]) -> str:
    # template options look like "loader!other-loader!path/to/page.hbs"
    if template is None:
        raise ValueError("page has no template option")
    return template.split("!")[-1]


def register_generated_page(
    registry: TemplateRegistry, ledger: DependencyLedger, prefix: str, page: PageData
) -> PageData:
    registry.register_partial(page_partial_name(prefix, page.output_name), page.html)
    try:
        source_file = source_file_from_template(page.template)
        if not source_file:
            raise ValueError(f"no source file in template option {page.template!r}")
        ledger.add(source_file)
    except ValueError as e:
        log.warning("page_source_template_not_tracked", page=page.output_name, error=str(e))
    return page
