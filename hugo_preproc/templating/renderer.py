"""Template compilation and rendering for file paths, contents and commands."""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError

from ..errors import TemplateError
from ..logging import get_logger
from .functions import FUNCTIONS


def template_variables(context: Any) -> Dict[str, Any]:
    """Map a pipeline context value to the names a template can reference."""
    if isinstance(context, str):
        return {"file": context}
    builder = getattr(context, "template_context", None)
    if callable(builder):
        return dict(builder())
    if isinstance(context, Mapping):
        return dict(context)
    raise TypeError(f"unsupported template context: {type(context).__name__}")


class TemplateRenderer:
    """Renders Jinja templates with the helper function library bound."""

    def __init__(self, functions: Mapping[str, Callable[..., Any]] | None = None) -> None:
        self._env = self._create_env(FUNCTIONS if functions is None else functions)
        self.logger = get_logger("templating")

    def render(self, source: str, context: Any, *, name: str = "template") -> str:
        """Compile ``source`` and render it against ``context``."""
        try:
            template = self._env.from_string(source)
        except TemplateSyntaxError as exc:
            raise TemplateError(name, f"line {exc.lineno}: {exc.message}") from exc

        variables = template_variables(context)
        try:
            rendered = template.render(variables)
        except Exception as exc:
            raise TemplateError(name, f"{exc.__class__.__name__}: {exc}") from exc
        self.logger.debug("Rendered %s (%d chars)", name, len(rendered))
        return rendered

    @staticmethod
    def _create_env(functions: Mapping[str, Callable[..., Any]]) -> Environment:
        env = Environment(
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        env.globals.update(functions)
        # Jinja's own filters keep their names; helpers fill in the rest.
        for name, function in functions.items():
            env.filters.setdefault(name, function)
        return env


__all__ = ["TemplateRenderer", "template_variables"]
