"""Tests for the LaTeX compilation service (engine invocation is faked)."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

from jobpilot.latex_compiler.service import (
    LatexCompilationError,
    LatexService,
    LatexServiceError,
    LatexTimeoutError,
    extract_log_errors,
)

UNDEFINED_CONTROL_LOG = """This is pdfTeX, Version 3.141592653
(./document.tex
LaTeX2e <2022-11-01>
! Undefined control sequence.
l.5 \\foo
         {bar}
Here is how much of TeX's memory you used:
"""


class FakeEngine:
    """Stands in for ``subprocess.run`` and records the working directory."""

    def __init__(
        self,
        returncode: int = 0,
        pdf: bytes | None = b"%PDF-1.5 fake",
        log: str | None = None,
        stdout: str = "",
        timeout: bool = False,
    ) -> None:
        self.returncode = returncode
        self.pdf = pdf
        self.log = log
        self.stdout = stdout
        self.timeout = timeout
        self.calls: list[dict] = []

    def __call__(self, cmd, **kwargs):
        workdir = Path(kwargs["cwd"])
        self.calls.append({"cmd": cmd, "workdir": workdir, **kwargs})
        if self.timeout:
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])
        if self.log is not None:
            (workdir / "document.log").write_text(self.log, encoding="utf-8")
        if self.pdf is not None:
            (workdir / "document.pdf").write_bytes(self.pdf)
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout)


@pytest.fixture
def engine_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "which", lambda command: f"/usr/bin/{command}")


def _install(monkeypatch: pytest.MonkeyPatch, engine: FakeEngine) -> FakeEngine:
    monkeypatch.setattr(subprocess, "run", engine)
    return engine


@pytest.mark.usefixtures("engine_on_path")
class TestCompile:
    def test_returns_pdf_bytes_and_cleans_up(self, monkeypatch):
        engine = _install(monkeypatch, FakeEngine())

        pdf = LatexService().compile(r"\documentclass{article}\begin{document}x\end{document}")

        assert pdf == b"%PDF-1.5 fake"
        workdir = engine.calls[0]["workdir"]
        assert not workdir.exists()

    def test_engine_runs_non_interactive_without_shell_escape(self, monkeypatch):
        engine = _install(monkeypatch, FakeEngine())

        LatexService(command="pdflatex", timeout=5).compile("x")

        call = engine.calls[0]
        assert call["cmd"][0] == "/usr/bin/pdflatex"
        assert "-interaction=nonstopmode" in call["cmd"]
        assert "-halt-on-error" in call["cmd"]
        assert "-no-shell-escape" in call["cmd"]
        assert call["cmd"][-1] == "document.tex"
        assert call["timeout"] == 5
        assert call["stdin"] is subprocess.DEVNULL

    def test_source_is_written_verbatim(self, monkeypatch):
        seen: dict[str, str] = {}

        def _engine(cmd, **kwargs):
            seen["source"] = (Path(kwargs["cwd"]) / "document.tex").read_text(encoding="utf-8")
            (Path(kwargs["cwd"]) / "document.pdf").write_bytes(b"%PDF")
            return subprocess.CompletedProcess(cmd, 0, stdout="")

        monkeypatch.setattr(subprocess, "run", _engine)

        LatexService().compile("Résumé 50\\% \\& more")

        assert seen["source"] == "Résumé 50\\% \\& more"

    def test_compilation_error_carries_log_lines(self, monkeypatch):
        engine = _install(
            monkeypatch, FakeEngine(returncode=1, pdf=None, log=UNDEFINED_CONTROL_LOG)
        )

        with pytest.raises(LatexCompilationError) as exc_info:
            LatexService().compile(r"\foo{bar}")

        details = exc_info.value.details
        assert details.startswith("! Undefined control sequence.")
        assert "l.5 \\foo" in details
        assert "pdfTeX" not in details
        assert not engine.calls[0]["workdir"].exists()

    def test_compilation_error_without_log_uses_output_tail(self, monkeypatch):
        output = "\n".join(f"line {i}" for i in range(40))
        _install(monkeypatch, FakeEngine(returncode=1, pdf=None, stdout=output))

        with pytest.raises(LatexCompilationError) as exc_info:
            LatexService().compile("x")

        details = exc_info.value.details
        assert details.splitlines()[0] == "line 15"
        assert details.splitlines()[-1] == "line 39"

    def test_timeout(self, monkeypatch):
        engine = _install(monkeypatch, FakeEngine(timeout=True))

        with pytest.raises(LatexTimeoutError, match="timed out after 2 seconds"):
            LatexService(timeout=2).compile("x")
        assert not engine.calls[0]["workdir"].exists()

    def test_success_without_pdf(self, monkeypatch):
        _install(monkeypatch, FakeEngine(pdf=None))

        with pytest.raises(LatexServiceError, match="without producing a PDF"):
            LatexService().compile("x")


def test_missing_engine(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(shutil, "which", lambda command: None)

    with pytest.raises(LatexServiceError, match="'lualatex' not found"):
        LatexService(command="lualatex").compile("x")


def test_configuration_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LATEX_COMPILER_COMMAND", "xelatex")
    monkeypatch.setenv("LATEX_COMPILE_TIMEOUT", "15")

    service = LatexService()

    assert service.command == "xelatex"
    assert service.timeout == 15.0


def test_defaults(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("LATEX_COMPILER_COMMAND", raising=False)
    monkeypatch.delenv("LATEX_COMPILE_TIMEOUT", raising=False)

    service = LatexService()

    assert service.command == "pdflatex"
    assert service.timeout == 60.0


def test_extract_log_errors_collects_every_error():
    log = "intro\n! First error.\nl.1 a\n\nmore\n! Second error.\nl.9 b\n"

    assert extract_log_errors(log) == "! First error.\nl.1 a\n\n! Second error.\nl.9 b\n".strip()


def test_extract_log_errors_falls_back_to_tail():
    log = "\n".join(f"line {i}" for i in range(30))

    excerpt = extract_log_errors(log)

    assert excerpt.splitlines() == [f"line {i}" for i in range(5, 30)]
