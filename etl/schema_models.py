"""
Pydantic models for decoded LLM extraction output.

JobParsedData mirrors JOB_PARSER_FIELDS in etl/schemas.py field for field.
Validation is strict: no coercion, no missing keys, no extra keys, so a
payload that passes is exactly what the schema promised. Only the camelCase
JSON names are accepted on input.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobParsedData(BaseModel):
    """Structured vacancy fields extracted from one message."""
    model_config = ConfigDict(
        extra='forbid',
        strict=True,
        alias_generator=to_camel,
    )

    is_vacancy: bool
    title: str
    company: str
    salary_min: int
    salary_max: int
    currency: str
    skills: List[str]
    is_remote: bool
    grade: str
    location: str
    description: str

    def to_job_fields(self) -> Dict[str, Any]:
        """Column values for a jobs record.

        Non-vacancies keep only the classification; every descriptive and
        compensation field is reset to its default.
        """
        if not self.is_vacancy:
            return {
                'is_vacancy': False,
                'title': '',
                'company': '',
                'salary_min': 0,
                'salary_max': 0,
                'currency': '',
                'skills': [],
                'is_remote': False,
                'grade': '',
                'location': '',
                'description': '',
            }
        return {
            'is_vacancy': True,
            'title': self.title.strip(),
            'company': self.company,
            'salary_min': self.salary_min,
            'salary_max': self.salary_max,
            'currency': self.currency,
            'skills': list(self.skills),
            'is_remote': self.is_remote,
            'grade': self.grade,
            'location': self.location,
            'description': self.description,
        }


@dataclass
class VacancyAnalysis:
    """Result of one extraction call: validated fields plus the raw payload."""
    data: JobParsedData
    raw: Dict[str, Any] = field(default_factory=dict)
