from .base import Base
from .job import Job

__all__ = [
    'Base',
    'Job',
]
