"""Schema migrations for the jobs table, applied in the order of MIGRATIONS."""
import importlib
import logging

logger = logging.getLogger(__name__)

MIGRATIONS = [
    'migrations.migrate_create_jobs',
    'migrations.migrate_add_hash_raw',
    'migrations.migrate_add_timestamps',
]


def run_migrations(engine=None, rollback: bool = False) -> bool:
    """Apply every migration in order, or roll them back in reverse.

    Stops at the first failing step.
    """
    names = list(reversed(MIGRATIONS)) if rollback else MIGRATIONS
    for name in names:
        module = importlib.import_module(name)
        step = module.rollback if rollback else module.migrate
        logger.info(f"Running {name}.{step.__name__}")
        if not step(engine):
            logger.error(f"{name} failed, stopping")
            return False
    return True
