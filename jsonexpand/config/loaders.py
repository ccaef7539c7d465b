"""
Template bundle loaders.

A bundle is a directory holding a template and the data used with it:

    <template_dir>/<name>/template.json     required
    <template_dir>/<name>/input.json        optional input document
    <template_dir>/<name>/reference.json    optional reference data (ref)
    <template_dir>/<name>/fragments.json    optional {"fragment name": {...}}
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..exceptions import ConfigurationError
from ..rendering import Template

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "template.json"
INPUT_FILE = "input.json"
REFERENCE_FILE = "reference.json"
FRAGMENTS_FILE = "fragments.json"


@dataclass
class TemplateBundle:
    """A template with its input, reference data and fragments."""

    name: str
    template: str
    input: Dict[str, Any] = field(default_factory=dict)
    reference: Optional[Dict[str, Any]] = None
    fragments: Dict[str, str] = field(default_factory=dict)

    def build(self, **options: Any) -> Template:
        """
        Compile the bundle into a Template.

        Args:
            **options: Extra Template keyword options (e.g., missing_key_errors)

        Returns:
            Compiled Template
        """
        if self.reference is not None:
            options.setdefault("ref", self.reference)
        if self.fragments:
            options.setdefault("fragments", self.fragments)
        return Template(self.template, **options)


class TemplateLoader:
    """Loads template bundles from a directory."""

    def __init__(self, template_dir: str = "examples"):
        self.template_dir = Path(template_dir)

    def load_bundle(self, name: str) -> TemplateBundle:
        """
        Load a bundle by name.

        Raises:
            FileNotFoundError: If the bundle or its template.json does not exist
            ConfigurationError: If a bundle file is not valid JSON
        """
        bundle_dir = self.template_dir / name
        template_file = bundle_dir / TEMPLATE_FILE
        if not template_file.exists():
            raise FileNotFoundError(f"Template not found: {name}")

        template = template_file.read_text(encoding="utf-8")
        input_data = self._load_json(bundle_dir / INPUT_FILE)
        reference = self._load_json(bundle_dir / REFERENCE_FILE)
        fragment_data = self._load_json(bundle_dir / FRAGMENTS_FILE)

        if fragment_data is not None and not isinstance(fragment_data, dict):
            raise ConfigurationError(f"{bundle_dir / FRAGMENTS_FILE}: expected a JSON object")

        # Fragments are compiled from text, so re-encode each one
        fragments = {
            fragment_name: json.dumps(body)
            for fragment_name, body in (fragment_data or {}).items()
        }

        logger.info("Loaded template bundle %r (%d fragment(s))", name, len(fragments))
        return TemplateBundle(
            name=name,
            template=template,
            input=input_data if input_data is not None else {},
            reference=reference,
            fragments=fragments,
        )

    def available_bundles(self) -> List[str]:
        """Get the names of all bundles in the template directory."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            path.name for path in self.template_dir.iterdir()
            if (path / TEMPLATE_FILE).is_file()
        )

    @staticmethod
    def _load_json(path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
