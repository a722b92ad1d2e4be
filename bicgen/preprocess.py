"""Running the C preprocessor over generated snippets of source."""

from __future__ import annotations

import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable


class PreprocessorError(Exception):
    """Raised when the preprocessor cannot be run or reports failure."""


class Preprocessor:
    """Builds and runs preprocessor commands with a list of include dirs."""

    def __init__(self, compiler: str = "gcc") -> None:
        self.compiler = compiler
        self.include_dirs: list[str] = []

    def add_include_dir(self, directory: str) -> None:
        self.include_dirs.append(directory)

    def build_command(self, opts: str, source_path: str, output_path: str) -> str:
        """Return the shell command that preprocesses into ``output_path``."""
        include_opts = "".join(f" -I {shlex.quote(d)}" for d in self.include_dirs)
        return (
            f"{self.compiler} {opts} {include_opts} "
            f"{shlex.quote(str(source_path))} > {shlex.quote(str(output_path))}"
        )

    def run(
        self, include_lines: Iterable[str], opts: str, line: str | None = None
    ) -> str:
        """Preprocess the include lines followed by ``line``; return the output."""
        with tempfile.TemporaryDirectory(prefix="bic.cpp.") as workdir:
            source = Path(workdir) / "input.c"
            output = Path(workdir) / "output.c"
            text = "".join(f"{include}\n" for include in include_lines)
            if line:
                text += line
            source.write_text(text)
            command = self.build_command(opts, str(source), str(output))
            try:
                result = subprocess.run(command, shell=True)
            except OSError as exc:
                raise PreprocessorError(
                    "Invocation of preprocessor process failed"
                ) from exc
            if result.returncode < 0:
                raise PreprocessorError("Invocation of preprocessor process failed")
            if result.returncode > 0:
                raise PreprocessorError(
                    "Preprocessor command exited with non-zero status"
                )
            return output.read_text()


def last_line(text: str) -> str:
    """Return the final line of ``text`` without its line terminator."""
    if text.endswith("\n"):
        text = text[:-1]
    return text.rsplit("\n", 1)[-1]