#!/usr/bin/env python3
"""
expand_example.py - Expand a template bundle from the command line

Loads a bundle (template.json, input.json, reference.json, fragments.json)
from a directory, expands it and prints the resulting JSON document.

Examples:
    python expand_example.py basic
    python expand_example.py fragments --dir examples --indent 2
    python expand_example.py --check
"""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from jsonexpand import TemplateError, compute_functions
from jsonexpand.config import TemplateLoader

logger = logging.getLogger("expand_example")


def check_bundles(loader: TemplateLoader) -> int:
    """
    Compile every bundle in the template directory.

    Returns:
        Number of bundles that failed to load or compile
    """
    failures = 0
    names = loader.available_bundles()
    for name in names:
        try:
            loader.load_bundle(name).build(functions=compute_functions())
        except (TemplateError, OSError) as e:
            logger.warning("Bundle %s failed: %s", name, e)
            print(f"✗ {name}: {e}")
            failures += 1
        else:
            print(f"✓ {name}")

    print(f"\n{len(names) - failures}/{len(names)} bundles compiled")
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Expand a JSON template bundle and print the result"
    )
    parser.add_argument("name", nargs="?", help="Bundle name (e.g. basic)")
    parser.add_argument("-d", "--dir", default="examples", help="Directory holding the bundles (default: examples)")
    parser.add_argument("-i", "--input", help="JSON file to use instead of the bundle's input.json")
    parser.add_argument("--missing-key-errors", action="store_true", help="Fail when an expression reads a missing key")
    parser.add_argument("--indent", type=int, help="Pretty-print the output with this indent")
    parser.add_argument("--check", action="store_true", help="Compile every bundle and report failures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    loader = TemplateLoader(args.dir)

    if args.check:
        return 1 if check_bundles(loader) else 0

    if not args.name:
        parser.print_usage()
        print("expand_example.py: error: a bundle name is required (e.g. basic)")
        return 1

    try:
        bundle = loader.load_bundle(args.name)
        data = bundle.input
        if args.input:
            with open(Path(args.input), encoding="utf-8") as f:
                data = json.load(f)

        template = bundle.build(
            functions=compute_functions(),
            missing_key_errors=args.missing_key_errors,
        )
        result = template.expand(data)
    except (TemplateError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}")
        return 1

    if args.indent is not None:
        result = json.dumps(json.loads(result), indent=args.indent, ensure_ascii=False)

    print(result)
    return 0


if __name__ == "__main__":
    exit(main())
