"""Shared fixtures: a sample memo, a config rooted in tmp_path and fake collaborators."""

import datetime as dt
from pathlib import Path

import pytest

from integrations.config import StandupConfig
from integrations.memos import PostResult

TEMPLATE_PATH = Path(__file__).resolve().parents[1] / "tools" / "standup-template.md"

PREVIOUS_MEMO = """#standup Tuesday 01-07-2025

<!-- generated 1736262000000 -->

<div class="standup-status">

#### Status
- Feeling good

</div>

<div class="standup-yesterday">

#### Yesterday
Key: [x] done&nbsp;&nbsp;[ ] not started
- [x] Shipped the release
- [ ] Write changelog
- Review PR 42
  - [ ] In Progress
- Fix flaky test
  - [x] Blocked

</div>

<div class="standup-today">

#### Today
- [x] Deploy staging
- [ ] Update docs
- [ ] Write changelog

</div>

<div class="standup-blockers">

#### Blockers
- [x] Waiting on API keys

</div>

<div class="standup-notes">

#### Notes
- Dentist at&nbsp;3pm

</div>
"""


class FakeEditor:
    """Replays a list of file contents, one per editor launch."""

    def __init__(self, contents=None, status=0):
        self.contents = list(contents or [])
        self.status = status
        self.calls = 0

    def edit(self, path):
        self.calls += 1
        if self.contents:
            path.write_text(self.contents.pop(0), encoding="utf-8")
        return self.status


class FakePoster:
    def __init__(self, result=None):
        self.result = result or PostResult(returncode=0, stdout='{"name": "memos/abc123"}')
        self.posted = []

    def post(self, content):
        self.posted.append(content)
        return self.result


class FakePrompt:
    def __init__(self, answers):
        self.answers = list(answers)
        self.questions = []

    def __call__(self, question):
        self.questions.append(question)
        return self.answers.pop(0)


@pytest.fixture
def previous_memo():
    return PREVIOUS_MEMO


@pytest.fixture
def config(tmp_path):
    return StandupConfig(
        memos_db=tmp_path / "memos_prod.db",
        backup_dir=tmp_path / "dbBackups",
        template_path=TEMPLATE_PATH,
        scratch_dir=tmp_path / "scratch",
        poster_path=tmp_path / "postMemo",
        memos_url="https://memos.example.com",
        proofread_backend="none",
    )


@pytest.fixture
def fixed_now():
    # Wednesday of an even week
    return dt.datetime(2025, 1, 8, 9, 30)
