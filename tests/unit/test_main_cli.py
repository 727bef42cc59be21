import json
import uuid

import pytest
from unittest.mock import MagicMock, patch

import main
from etl.orchestrator import IngestResult, IngestStatus, JobNotFoundError


@pytest.fixture
def messages_file(tmp_path):
    path = tmp_path / "messages.jsonl"
    path.write_text(
        json.dumps({"text": "Go developer wanted", "channel_id": "-100", "message_id": 1}) + "\n"
        + "\n"
        + "{not json\n"
        + json.dumps({"text": "Ищем Go разработчика", "channel_id": -100, "message_id": "2", "url": "https://t.me/c/2"}) + "\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def ctx(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    context = MagicMock()
    context.config.ingest.workers = 1
    with patch.object(main.AppContext, "build", return_value=context):
        yield context


def test_read_messages_skips_malformed_lines(messages_file):
    messages = main.read_messages(str(messages_file))

    assert [m.message_id for m in messages] == [1, 2]
    assert messages[1].channel_id == "-100"
    assert messages[1].url == "https://t.me/c/2"


def test_ingest_prints_one_result_per_message(ctx, messages_file, capsys):
    job_id = uuid.uuid4()
    ctx.job_etl_service.ingest_many.return_value = [
        IngestResult(IngestStatus.CREATED, job_id),
        IngestResult(IngestStatus.DUPLICATE, job_id, "hash"),
    ]

    code = main.main(["ingest", str(messages_file), "--workers", "2"])

    assert code == 0
    ctx.job_etl_service.ingest_many.assert_called_once()
    assert ctx.job_etl_service.ingest_many.call_args[1] == {"max_workers": 2}
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines[0] == {"source": "-100:1", "status": "created", "job_id": str(job_id), "matched_by": None, "error": None}
    assert lines[1]["status"] == "duplicate"
    ctx.close.assert_called_once()


def test_ingest_exit_code_reports_failures(ctx, messages_file):
    ctx.job_etl_service.ingest_many.return_value = [
        IngestResult(IngestStatus.CREATED, uuid.uuid4()),
        IngestResult(IngestStatus.FAILED, error="boom"),
    ]

    assert main.main(["ingest", str(messages_file)]) == 1


def test_offer_requires_a_cv(ctx):
    ctx.config.offer.cv_file = None

    assert main.main(["offer", "--job-id", str(uuid.uuid4())]) == 2


def test_offer_unknown_job(ctx, tmp_path):
    cv = tmp_path / "cv.txt"
    cv.write_text("Go developer", encoding="utf-8")
    ctx.job_etl_service.draft_offer.side_effect = JobNotFoundError("missing")

    with patch("database.uow.job_uow") as uow:
        uow.return_value.__enter__.return_value = MagicMock()
        code = main.main(["offer", "--job-id", str(uuid.uuid4()), "--cv", str(cv)])

    assert code == 1
    ctx.close.assert_called_once()


def test_list_flags():
    args = main.build_parser().parse_args(["list"])
    assert args.remote is None
    assert args.all is False

    args = main.build_parser().parse_args(["list", "--onsite", "--grade", "senior"])
    assert args.remote is False
    assert args.grade == "senior"
