#!/usr/bin/env python3
"""
Print the strict JSON Schema sent with vacancy extraction requests.

Not used by the pipeline; handy for eyeballing the schema after editing
the field list in etl/schemas.py.

Example usage:
    python scripts/generate_openai_schema.py --format json
    python scripts/generate_openai_schema.py --format markdown
"""
import argparse
import json
import sys
from pathlib import Path

# Ensure we can import from the project root
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from etl.schemas import JOB_PARSER_SCHEMA


def format_json(data: dict, indent: int = 2) -> str:
    """Format dict as JSON string."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


def generate_markdown_for_schema(schema: dict) -> str:
    """Generate human-readable markdown for a schema."""
    md = [f"## {schema['name']}\n\n", f"- **Strict**: `{schema['strict']}`\n\n", "### Fields\n\n"]
    for field, props in schema['schema']['properties'].items():
        field_type = props.get('type')
        if isinstance(field_type, list):
            field_type = " | ".join(field_type)
        desc = props.get('description', 'No description')
        md.append(f"- `{field}` ({field_type}): {desc}\n")
    return "".join(md)


def main():
    parser = argparse.ArgumentParser(
        description="Print the vacancy extraction JSON Schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--format', choices=['json', 'markdown'], default='json')
    parser.add_argument('--indent', type=int, default=2, help='JSON indent spaces (default: 2)')
    args = parser.parse_args()

    if args.format == 'markdown':
        print(generate_markdown_for_schema(JOB_PARSER_SCHEMA))
    else:
        print(format_json(JOB_PARSER_SCHEMA, args.indent))


if __name__ == "__main__":
    main()
