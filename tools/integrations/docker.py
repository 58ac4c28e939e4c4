from __future__ import annotations

import subprocess


class DockerContainer:
    def __init__(self, name: str) -> None:
        self.name = name

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(["docker", *args], capture_output=True, text=True)

    def is_running(self) -> bool:
        try:
            proc = self._run("ps", "--format", "{{.Names}}")
        except OSError:
            return False
        if proc.returncode != 0:
            return False
        return self.name in {line.strip() for line in proc.stdout.splitlines()}

    def stop(self) -> None:
        self._run("stop", self.name)

    def start(self) -> None:
        self._run("start", self.name)
