"""Shell command execution for exec processors."""

from __future__ import annotations

import subprocess
import sys
import tempfile
from typing import Callable, Iterable, TextIO

from .errors import CommandError
from .logging import get_logger

Runner = Callable[[Iterable[str], TextIO], subprocess.CompletedProcess]


class ShellRunner:
    """Runs rendered commands through ``sh -c``, streaming their output.

    A runner receives the argument vector and the stream to forward stdout to
    while the command runs; it returns a CompletedProcess carrying the exit
    status and captured stderr.
    """

    def __init__(
        self,
        runner: Runner | None = None,
        *,
        shell: str = "sh",
        stdout: TextIO | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self.shell = shell
        self._stdout = stdout
        self.logger = get_logger("shell")

    def run(self, command: str) -> int:
        """Run ``command``; raise CommandError on a non-zero exit status."""
        self.logger.debug("Executing command: %s", command)
        completed = self._runner([self.shell, "-c", command], self._stdout or sys.stdout)
        if completed.returncode != 0:
            raise CommandError(command, completed.returncode, completed.stderr or "")
        return completed.returncode

    @staticmethod
    def _default_runner(args: Iterable[str], stream: TextIO) -> subprocess.CompletedProcess:
        argv = list(args)
        # stderr goes to a file so a chatty command cannot block on a full pipe
        with tempfile.TemporaryFile("w+", encoding="utf-8", errors="replace") as errors:
            try:
                process = subprocess.Popen(
                    argv,
                    stdout=subprocess.PIPE,
                    stderr=errors,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except OSError as exc:
                raise CommandError(" ".join(argv), 127, str(exc)) from exc

            with process:
                assert process.stdout is not None
                for line in process.stdout:
                    stream.write(line)
                    stream.flush()
                returncode = process.wait()

            errors.seek(0)
            return subprocess.CompletedProcess(argv, returncode, stdout=None, stderr=errors.read())


__all__ = ["ShellRunner"]
