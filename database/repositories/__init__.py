from database.repositories.base import BaseRepository
from database.repositories.job import JobRepository

__all__ = [
    'BaseRepository',
    'JobRepository',
]
