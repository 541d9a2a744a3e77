"""Template rendering with the helper function library."""

from .functions import FUNCTIONS
from .renderer import TemplateRenderer, template_variables

__all__ = ["FUNCTIONS", "TemplateRenderer", "template_variables"]
