#!/usr/bin/env python3
"""Daily standup helper for a self-hosted Memos instance.

Flow:
- Read the newest #standup memo and turn it into a new draft (today's open
  items carry over, finished ones move to yesterday).
- Write the draft as relaxed JSON and open it in $EDITOR.
- Re-parse, check the live flag, optionally proofread, render the markdown
  template, back up the database and post through postMemo.
"""

from __future__ import annotations

import argparse
import datetime as dt
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

from core.dates import BinSchedule, get_date_info
from core.draft import Draft, DraftParseError, dump_draft, parse_draft
from core.proofreader import make_proofreader, proofread_draft
from core.renderer import load_template, render_standup
from core.transform import transform_standup
from integrations.config import StandupConfig, load_config
from integrations.editor import Editor
from integrations.memos import MemosPoster, MemosStore, memo_link

PromptFn = Callable[[str], str]


def _ask(prompt: PromptFn, question: str) -> str:
    return prompt(question).strip().lower()


class StandupSession:
    """One edit/post round trip over a single scratch file."""

    def __init__(
        self,
        config: StandupConfig,
        editor: Any,
        poster: Any,
        store: Optional[MemosStore] = None,
        proofreader: Optional[Any] = None,
        prompt: PromptFn = input,
        today: Optional[dt.date] = None,
        now: Optional[dt.datetime] = None,
    ) -> None:
        self.config = config
        self.editor = editor
        self.poster = poster
        self.store = store
        self.proofreader = proofreader
        self.prompt = prompt
        self.now = now or dt.datetime.now()
        self.today = today or self.now.date()
        self.scratch_path = config.scratch_path(self.now)

    def prepare(self, prev_content: str) -> Draft:
        if prev_content:
            print("Found previous standup, transforming...")
        else:
            print("No previous standup found, creating blank...")
        schedule = BinSchedule.from_mapping(self.config.auto_tasks)
        draft = transform_standup(prev_content, today=self.today, schedule=schedule)
        self.scratch_path.parent.mkdir(parents=True, exist_ok=True)
        self.scratch_path.write_text(dump_draft(draft), encoding="utf-8")
        print(f"Wrote: {self.scratch_path}")
        return draft

    def _read_draft(self) -> Optional[Draft]:
        try:
            return parse_draft(self.scratch_path.read_text(encoding="utf-8"))
        except (DraftParseError, OSError) as exc:
            print(f"\nJSON parse error: {exc}", file=sys.stderr)
            return None

    def run(self) -> int:
        while True:
            print(f"\nLaunching {self.config.editor}...")
            status = self.editor.edit(self.scratch_path)
            if status != 0:
                print(f"Error: editor exited with status {status}", file=sys.stderr)
                return 1

            draft = self._read_draft()
            if draft is None:
                answer = _ask(self.prompt, "\n(E)dit again, or (q)uit? [E/q]: ")
                if answer in {"q", "quit"}:
                    print("Cancelled.")
                    return 0
                continue

            if not draft.live:
                print("\n[warn] standup not marked as live (live: false)")
                answer = _ask(self.prompt, "(E)dit again, (p)ost anyway, or (q)uit? [E/p/q]: ")
                if answer in {"q", "quit"}:
                    print("Cancelled.")
                    return 0
                if answer not in {"p", "post"}:
                    continue
                draft = draft.model_copy(update={"live": True})

            if self.proofreader is not None:
                draft = proofread_draft(draft, self.proofreader)

            return self.post(draft)

    def post(self, draft: Draft) -> int:
        template = load_template(self.config.template_path)
        content = render_standup(
            draft,
            template,
            info=get_date_info(self.today),
            now_ms=int(self.now.timestamp() * 1000),
        )

        if self.store is not None:
            self.store.backup_database()

        print("Posting to memos...")
        result = self.poster.post(content)
        if not result.ok:
            fallback = self.scratch_path.with_suffix(".md")
            fallback.write_text(content, encoding="utf-8")
            print(f"Error posting to memos\n{result.stderr}", file=sys.stderr)
            print(f"[fallback] {fallback}")
            return 1

        link = memo_link(result.stdout, self.config.memos_url)
        if link:
            print(f"Standup posted!\n   {link}")
        else:
            print("Standup posted!")
        return 0


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Draft, edit and post today's standup memo.")
    parser.add_argument("--config", type=Path, help="Path to config.yaml (default: $STANDUP_CONFIG or config/config.yaml)")
    parser.add_argument("--date", type=str, help="ISO date, default today")
    parser.add_argument("--no-proofread", action="store_true", help="Skip the proofreading pass")
    return parser.parse_args(argv)


def main(argv: List[str]) -> int:
    args = parse_args(argv)
    today = dt.date.fromisoformat(args.date) if args.date else None
    try:
        config = StandupConfig.from_config(load_config(args.config))
        store = MemosStore(config.memos_db, config.backup_dir)
        session = StandupSession(
            config,
            editor=Editor(config.editor),
            poster=MemosPoster(config.poster_path),
            store=store,
            proofreader=None if args.no_proofread else make_proofreader(config),
            today=today,
        )
        session.prepare(store.last_standup(config.standup_tag))
        return session.run()
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
