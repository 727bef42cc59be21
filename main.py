import logging
import os
import sys
import json
import argparse
from typing import List

from core.app_context import AppContext
from core.config_loader import AppConfig, load_config
from etl.orchestrator import InboundMessage, IngestStatus, JobNotFoundError, load_cv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def read_messages(path: str) -> List[InboundMessage]:
    """Read inbound messages from a JSON-lines file (one object per line)."""
    messages = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                messages.append(InboundMessage.from_dict(json.loads(line)))
            except (json.JSONDecodeError, ValueError, TypeError) as e:
                logger.error(f"Skipping malformed line {line_no} in {path}: {e}")
    return messages


def cmd_ingest(ctx: AppContext, args) -> int:
    messages = read_messages(args.file)
    workers = args.workers or ctx.config.ingest.workers
    results = ctx.job_etl_service.ingest_many(messages, max_workers=workers)
    for message, result in zip(messages, results):
        print(json.dumps({
            'source': message.source_key,
            'status': result.status.value,
            'job_id': str(result.job_id) if result.job_id else None,
            'matched_by': result.matched_by,
            'error': result.error,
        }, ensure_ascii=False))
    return 1 if any(r.status == IngestStatus.FAILED for r in results) else 0


def cmd_offer(ctx: AppContext, args) -> int:
    from database.uow import job_uow

    cv_file = args.cv or ctx.config.offer.cv_file
    if not cv_file:
        logger.error("No CV given: pass --cv or set offer.cv_file in config")
        return 2
    cv = load_cv(cv_file)

    try:
        with job_uow() as repo:
            message = ctx.job_etl_service.draft_offer(repo, args.job_id, cv)
    except JobNotFoundError as e:
        logger.error(str(e))
        return 1

    if not message:
        logger.info("Nothing to send")
        return 0
    print(message)
    return 0


def cmd_list(config: AppConfig, args) -> int:
    from database.uow import job_uow

    with job_uow() as repo:
        jobs = repo.list_jobs(
            search=args.search,
            is_remote=args.remote,
            grade=args.grade,
            vacancies_only=not args.all,
            limit=args.limit
        )
        for job in jobs:
            salary = ""
            if job.salary_min or job.salary_max:
                salary = f" {job.salary_min or '?'}-{job.salary_max or '?'} {job.currency}".rstrip()
            remote = " [remote]" if job.is_remote else ""
            print(f"{job.id}  {job.title or '-'} @ {job.company or '-'} {job.grade}{remote}{salary}")
    return 0


def cmd_init_db(config: AppConfig, args) -> int:
    from database.database import init_db
    logger.info("Initializing database...")
    init_db()
    logger.info("Tables created or verified.")
    return 0


def cmd_migrate(config: AppConfig, args) -> int:
    from migrations import run_migrations
    return 0 if run_migrations(rollback=args.rollback) else 1


def cmd_serve(config: AppConfig, args) -> int:
    import uvicorn

    host = config.web.host
    port = config.web.port
    logger.info(f"Starting jobfeed API on {host}:{port}")
    uvicorn.run("web.backend.app:app", host=host, port=port, reload=False, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Job posting extraction and outreach drafting")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    p_ingest = sub.add_parser("ingest", help="Ingest messages from a JSON-lines file")
    p_ingest.add_argument("file", help="JSONL file with text, channel_id, message_id, url")
    p_ingest.add_argument("--workers", type=int, default=None, help="Parallel ingestion workers")
    p_ingest.set_defaults(func=cmd_ingest, needs_llm=True)

    p_offer = sub.add_parser("offer", help="Draft a first-touch message for a stored job")
    p_offer.add_argument("--job-id", required=True)
    p_offer.add_argument("--cv", default=None, help="CV file (.json or text)")
    p_offer.set_defaults(func=cmd_offer, needs_llm=True)

    p_list = sub.add_parser("list", help="List stored vacancies")
    p_list.add_argument("--search", default=None)
    remote = p_list.add_mutually_exclusive_group()
    remote.add_argument("--remote", dest="remote", action="store_true", default=None)
    remote.add_argument("--onsite", dest="remote", action="store_false")
    p_list.add_argument("--grade", default=None)
    p_list.add_argument("--all", action="store_true", help="Include non-vacancy messages")
    p_list.add_argument("--limit", type=int, default=50)
    p_list.set_defaults(func=cmd_list)

    p_init = sub.add_parser("init-db", help="Create database tables")
    p_init.set_defaults(func=cmd_init_db)

    p_migrate = sub.add_parser("migrate", help="Apply schema migrations")
    p_migrate.add_argument("--rollback", action="store_true", help="Undo migrations in reverse order")
    p_migrate.set_defaults(func=cmd_migrate)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    # database.database reads the URL when first imported
    os.environ["DATABASE_URL"] = config.database.url
    if not getattr(args, "needs_llm", False):
        return args.func(config, args)

    ctx = AppContext.build(config)
    try:
        return args.func(ctx, args)
    finally:
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
