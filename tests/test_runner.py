"""Tests for the example runners and command-line entry point."""

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from crpt_api import main as main_module
from crpt_api.adapters.http.base import AbstractDocumentSubmitter
from crpt_api.adapters.rate_limit.base import TimeUnit
from crpt_api.core.errors import SerializationAppError
from crpt_api.runner import run_many_threads_example, run_single_thread_example


class CountingSubmitter(AbstractDocumentSubmitter):
    def __init__(self) -> None:
        self.count = 0
        self.closed = False
        self._lock = threading.Lock()

    def submit(self, payload: str, signature: str) -> str:
        with self._lock:
            self.count += 1
            return f'{{"n":{self.count}}}'

    def close(self) -> None:
        self.closed = True


def test_single_thread_example_submits_every_iteration(sample_document_path: Path) -> None:
    submitter = CountingSubmitter()

    bodies = run_single_thread_example(
        sample_document_path,
        TimeUnit.SECONDS,
        100,
        iterations=4,
        submitter=submitter,
    )

    assert bodies == ['{"n":1}', '{"n":2}', '{"n":3}', '{"n":4}']
    assert submitter.closed is True


def test_single_thread_example_missing_file(tmp_path: Path) -> None:
    submitter = CountingSubmitter()

    with pytest.raises(SerializationAppError):
        run_single_thread_example(tmp_path / "nope.json", TimeUnit.SECONDS, 1, submitter=submitter)

    assert submitter.count == 0
    assert submitter.closed is True


@pytest.mark.parametrize("content", [None, "{not json"])
def test_many_threads_example_bad_document_releases_client(tmp_path: Path, content: str | None) -> None:
    document_path = tmp_path / "document.json"
    if content is not None:
        document_path.write_text(content, encoding="utf-8")
    submitter = CountingSubmitter()

    with pytest.raises(SerializationAppError):
        run_many_threads_example(document_path, TimeUnit.SECONDS, 1, 2, submitter=submitter)

    assert submitter.count == 0
    assert submitter.closed is True


def test_many_threads_example_counts_submissions(sample_document_path: Path) -> None:
    submitter = CountingSubmitter()

    completed = run_many_threads_example(
        sample_document_path,
        TimeUnit.SECONDS,
        100,
        thread_count=3,
        iterations=5,
        submitter=submitter,
    )

    assert completed == 15
    assert submitter.count == 15
    assert submitter.closed is True


def test_many_threads_example_stops_workers_on_timeout(sample_document_path: Path) -> None:
    submitter = CountingSubmitter()

    completed = run_many_threads_example(
        sample_document_path,
        TimeUnit.MINUTES,
        2,
        thread_count=2,
        iterations=5,
        await_seconds=0.2,
        submitter=submitter,
    )

    assert completed == 2
    assert submitter.count == 2


def test_main_parses_arguments(sample_document_path: Path) -> None:
    with patch.object(main_module, "configure_logging"), patch.object(
        main_module, "run_many_threads_example", return_value=10
    ) as run_many:
        exit_code = main_module.main(
            [str(sample_document_path), "--threads", "4", "--limit", "3", "--time-unit", "MINUTES"]
        )

    assert exit_code == 0
    args, kwargs = run_many.call_args
    assert args == (str(sample_document_path), TimeUnit.MINUTES, 3, 4)
    assert kwargs["iterations"] == 20


def test_main_returns_error_code_on_app_error(tmp_path: Path) -> None:
    with patch.object(main_module, "configure_logging"):
        exit_code = main_module.main([str(tmp_path / "missing.json"), "--iterations", "1"])

    assert exit_code == 1
