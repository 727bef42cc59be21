"""
Output contract for vacancy extraction.

JOB_PARSER_FIELDS is the hand-authored field table; JOB_PARSER_SCHEMA is the
strict JSON schema derived from it once at import time and sent with every
extraction request.
"""
import copy
from typing import Any, Dict

JOB_PARSER_SCHEMA_NAME = "job_parser"

JOB_PARSER_FIELDS: Dict[str, Dict[str, Any]] = {
    "isVacancy": {
        "type": "boolean",
        "required": True,
        "description": "False if spam/advertisement/not a job posting.",
    },
    "title": {
        "type": "string",
        "required": True,
        "description": "Job title. Never empty when isVacancy is true.",
    },
    "company": {
        "type": "string",
        "required": True,
        "description": "Company name if mentioned, otherwise empty.",
    },
    "salaryMin": {
        "type": "integer",
        "required": True,
        "description": "Minimum salary as a bare number (0 if not specified).",
    },
    "salaryMax": {
        "type": "integer",
        "required": True,
        "description": "Maximum salary as a bare number (0 if not specified).",
    },
    "currency": {
        "type": "string",
        "required": True,
        "description": "Currency code (USD, EUR, RUB, etc.), empty if unknown.",
    },
    "skills": {
        "type": "array",
        "items": {"type": "string"},
        "required": True,
        "description": "Required skills/technologies as short keywords.",
    },
    "isRemote": {
        "type": "boolean",
        "required": True,
        "description": "Whether remote work is available.",
    },
    "grade": {
        "type": "string",
        "required": True,
        "description": "Junior, Middle, Senior, Lead, etc.",
    },
    "location": {
        "type": "string",
        "required": True,
        "description": "Office location if mentioned.",
    },
    "description": {
        "type": "string",
        "required": True,
        "description": "Brief job description.",
    },
}


def _property_schema(spec: Dict[str, Any]) -> Dict[str, Any]:
    prop: Dict[str, Any] = {
        "type": spec["type"] if spec.get("required", True) else [spec["type"], "null"],
        "description": spec["description"],
    }
    if "items" in spec:
        prop["items"] = copy.deepcopy(spec["items"])
    return prop


def build_strict_schema(fields: Dict[str, Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Build a wrapped strict-mode schema spec from a field table.

    Strict structured output needs every property listed under ``required``,
    so fields flagged as not required are emitted as nullable instead.

    Returns:
        {'name': str, 'strict': True, 'schema': {...}}
    """
    properties = {field: _property_schema(spec) for field, spec in fields.items()}
    return {
        "name": name,
        "strict": True,
        "schema": {
            "type": "object",
            "properties": properties,
            "required": list(fields.keys()),
            "additionalProperties": False,
        },
    }


JOB_PARSER_SCHEMA = build_strict_schema(JOB_PARSER_FIELDS, JOB_PARSER_SCHEMA_NAME)
