from __future__ import annotations

import shlex
import subprocess
import sys
from pathlib import Path


class Editor:
    def __init__(self, command: str = "vim") -> None:
        self.command = command

    def edit(self, path: Path) -> int:
        """Block on the editor; the return code is the editor's exit status."""
        argv = shlex.split(self.command) or ["vim"]
        try:
            return subprocess.run([*argv, str(path)]).returncode
        except OSError as exc:
            print(f"Error: could not launch {argv[0]}: {exc}", file=sys.stderr)
            return 127
