#!/usr/bin/env python3
"""
Lint the built-in templates plus an optional templates file
Usage: python scripts/validate_templates.py [--templates-file templates.json]
"""

import argparse
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.template_models import validate_template
from shared.template_registry import TemplateRegistry, TemplateRegistryConfig, load_registry_config
from utils.errors import TemplateValidationError


def lint(config: TemplateRegistryConfig) -> int:
    """Print every problem found; returns the number of problems"""
    problems = 0
    valid = []
    for template in config.templates:
        errors = validate_template(template)
        if errors:
            problems += len(errors)
            print(f"❌ {template.id} ({template.category}/{template.language})")
            for error in errors:
                print(f"   - {error}")
        else:
            print(f"✅ {template.id} ({template.category}/{template.language})")
            valid.append(template)

    registry = TemplateRegistry(TemplateRegistryConfig(templates=tuple(valid)))
    for category, issues in registry.check_defaults().items():
        problems += len(issues)
        for issue in issues:
            print(f"❌ category '{category}': {issue}")
    return problems


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Validate document templates')
    parser.add_argument('--templates-file', default=None, help='JSON file with extra templates')
    args = parser.parse_args(argv)

    try:
        config = load_registry_config(templates_file=args.templates_file)
    except (TemplateValidationError, OSError, ValueError) as e:
        print(f"❌ Could not load templates: {e}")
        return 2

    problems = lint(config)
    if problems:
        print(f"\n{problems} problem(s) found in {len(config.templates)} template(s)")
        return 1
    print(f"\nAll {len(config.templates)} template(s) are valid")
    return 0


if __name__ == "__main__":
    sys.exit(main())
