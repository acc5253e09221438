# SPDX-License-Identifier: MPL-2.0
import threading
from pathlib import Path
from typing import List

import pytest

from copyplop.runner import BaseRunner


class RecordingRunner(BaseRunner[List[str]]):
    """Collects the names of processed files and the threads that saw them."""

    operation = "recording"

    def __init__(self, config):
        super().__init__(config)
        self.threads = set()

    def new_result(self) -> List[str]:
        return []

    def process_file(self, file: str):
        self.threads.add(threading.get_ident())
        if file.endswith("skip.go"):
            return None
        return Path(file).name

    def record(self, result: List[str], outcome) -> None:
        result.append(outcome)


@pytest.fixture
def tree(tmp_path):
    for n in range(8):
        (tmp_path / f"f{n}.go").write_text("package main\n")
    (tmp_path / "skip.go").write_text("package main\n")
    (tmp_path / "readme.txt").write_text("text\n")
    return tmp_path


def test_candidate_files_filter_extensions(config, tree):
    names = sorted(Path(f).name for f in RecordingRunner(config).candidate_files(tree))
    assert names == [f"f{n}.go" for n in range(8)] + ["skip.go"]


def test_none_outcomes_are_not_recorded(config, tree):
    result = RecordingRunner(config).run(tree)
    assert sorted(result) == [f"f{n}.go" for n in range(8)]


def test_parallel_run_records_every_file(config, tree):
    result = RecordingRunner(config).run(tree, jobs=4)
    assert sorted(result) == [f"f{n}.go" for n in range(8)]


def test_sequential_run_stays_on_caller_thread(config, tree):
    runner = RecordingRunner(config)
    runner.run(tree, jobs=1)
    assert runner.threads == {threading.get_ident()}


class FailingRunner(RecordingRunner):
    def process_file(self, file: str):
        if file.endswith("f3.go"):
            raise RuntimeError("boom")
        return super().process_file(file)


def test_worker_errors_propagate_from_pool(config, tree):
    with pytest.raises(RuntimeError, match="boom"):
        FailingRunner(config).run(tree, jobs=4)
