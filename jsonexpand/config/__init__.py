"""Template bundle loading."""

from .loaders import TemplateBundle, TemplateLoader

__all__ = ["TemplateBundle", "TemplateLoader"]
