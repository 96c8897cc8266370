"""
Contains the TemplateRegistry, the per-pipeline Handlebars namespace that
holds partials and helpers and compiles/renders templates against them.
"""
from typing import Any, Callable, Dict, Iterator
import pybars  # type: ignore
import structlog

log = structlog.get_logger(__name__)


class Namespace:
    """Name -> value mapping with last-write-wins registration."""

    def __init__(self, kind: str, prepare: Callable[[Any], Any] = lambda value: value):
        self.kind = kind
        self._prepare = prepare
        self._entries: Dict[str, Any] = {}

    def register(self, name: str, value: Any) -> None:
        if name in self._entries:
            log.debug("namespace_entry_overwritten", kind=self.kind, name=name)
        self._entries[name] = self._prepare(value)

    def has(self, name: str) -> bool:
        return name in self._entries

    def get(self, name: str) -> Any:
        return self._entries[name]

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


class TemplateRegistry:
    """Owns a pybars compiler plus the partials and helpers visible to it."""

    def __init__(self):
        self.handlebars_compiler = pybars.Compiler()
        self.partials = Namespace("partial", self._compile_partial)
        self.helpers = Namespace("helper", self._check_helper)

    def _compile_partial(self, value: Any) -> Any:
        # partials may be registered as source text or as an already compiled template.
        if isinstance(value, str):
            return self.handlebars_compiler.compile(value)
        if callable(value):
            return value
        raise TypeError(f"partial must be template source or a compiled template, got {type(value).__name__}")

    @staticmethod
    def _check_helper(value: Any) -> Any:
        if not callable(value):
            raise TypeError(f"helper must be callable, got {type(value).__name__}")
        return value

    def register_partial(self, name: str, value: Any) -> None:
        self.partials.register(name, value)

    def register_helper(self, name: str, helper: Callable[..., Any]) -> None:
        self.helpers.register(name, helper)

    def compile(self, template_source: str) -> Callable[..., Any]:
        return self.handlebars_compiler.compile(template_source)

    def render(self, compiled_template: Callable[..., Any], data: Any) -> str:
        rendered = compiled_template(
            data, helpers=self.helpers.as_dict(), partials=self.partials.as_dict()
        )
        return str(rendered)
