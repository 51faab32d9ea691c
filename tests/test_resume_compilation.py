"""Tests for compiling resumes through the compilation service client."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from jobpilot.constants import GenerationStatus
from jobpilot.services.resume import ResumeNotFoundError, create_resume, get_resume, patch_resume
from jobpilot.services.resume_compilation import (
    CompilerClientError,
    LatexCompilationFailed,
    compile_and_save_resume,
    compile_latex_remote,
)

pytestmark = pytest.mark.usefixtures("api_db")

USER = "user-1"
PDF = b"%PDF-1.5 compiled"
POST_TARGET = "jobpilot.services.resume_compilation.requests.post"


def _response(status_code: int = 200, content: bytes = PDF, body: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.text = content.decode(errors="replace")
    if body is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


@pytest.fixture(autouse=True)
def compiler_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LATEX_COMPILER_URL", "http://compiler.test/")
    monkeypatch.setenv("LATEX_COMPILER_API_KEY", "s3cret")


class TestCompileLatexRemote:
    def test_posts_plain_text_with_key(self):
        with patch(POST_TARGET, return_value=_response()) as post:
            assert compile_latex_remote("\\documentclass{article}") == PDF

        args, kwargs = post.call_args
        assert args[0] == "http://compiler.test/latex/compile"
        assert kwargs["params"] == {"key": "s3cret"}
        assert kwargs["data"] == b"\\documentclass{article}"
        assert kwargs["headers"]["Content-Type"].startswith("text/plain")

    def test_no_key_param_without_api_key(self, monkeypatch):
        monkeypatch.delenv("LATEX_COMPILER_API_KEY")
        with patch(POST_TARGET, return_value=_response()) as post:
            compile_latex_remote("x")

        assert post.call_args.kwargs["params"] == {}

    def test_compilation_failure_carries_details(self):
        body = {"error": "Failed to compile LaTeX document", "details": "! Missing $ inserted."}
        with patch(POST_TARGET, return_value=_response(500, b"", body)):
            with pytest.raises(LatexCompilationFailed) as exc_info:
                compile_latex_remote("x")

        assert str(exc_info.value) == "Failed to compile LaTeX document"
        assert exc_info.value.user_message == "! Missing $ inserted."

    def test_bad_request_without_details(self):
        body = {"error": "LaTeX code is required in the request body as plain text"}
        with patch(POST_TARGET, return_value=_response(400, b"", body)):
            with pytest.raises(LatexCompilationFailed) as exc_info:
                compile_latex_remote(" ")

        assert exc_info.value.user_message == body["error"]

    def test_unreachable_service(self):
        with patch(POST_TARGET, side_effect=requests.ConnectionError("refused")):
            with pytest.raises(CompilerClientError, match="unreachable"):
                compile_latex_remote("x")

    def test_unauthorized_is_a_client_error(self):
        with patch(POST_TARGET, return_value=_response(401, b"", {"error": "Invalid API key"})):
            with pytest.raises(CompilerClientError, match="401") as exc_info:
                compile_latex_remote("x")

        assert not isinstance(exc_info.value, LatexCompilationFailed)

    def test_non_pdf_success_body(self):
        with patch(POST_TARGET, return_value=_response(200, b"<html>proxy</html>")):
            with pytest.raises(CompilerClientError, match="did not return a PDF"):
                compile_latex_remote("x")


class TestCompileAndSaveResume:
    def test_success_stores_pdf_and_latex(self):
        resume_id = create_resume(USER)
        patch_resume(
            resume_id,
            generation_status=GenerationStatus.COMPLETED,
            user_resume_compilation_error_message="old error",
        )

        with patch(POST_TARGET, return_value=_response()):
            pdf_path = compile_and_save_resume(resume_id, USER, "edited latex")

        assert Path(pdf_path).read_bytes() == PDF
        resume = get_resume(resume_id, USER)
        assert resume["latex_content"] == "edited latex"
        assert resume["compiled_resume_path"] == str(pdf_path)
        assert resume["user_resume_compilation_error_message"] is None
        assert resume["generation_status"] == "completed"

    def test_failure_records_error_and_keeps_status(self):
        resume_id = create_resume(USER)
        patch_resume(resume_id, generation_status=GenerationStatus.COMPLETED)
        body = {"error": "Failed to compile LaTeX document", "details": "! Emergency stop."}

        with patch(POST_TARGET, return_value=_response(500, b"", body)):
            with pytest.raises(LatexCompilationFailed):
                compile_and_save_resume(resume_id, USER, "broken latex")

        resume = get_resume(resume_id, USER)
        assert resume["latex_content"] == "broken latex"
        assert resume["user_resume_compilation_error_message"] == "! Emergency stop."
        assert resume["compiled_resume_path"] is None
        assert resume["generation_status"] == "completed"

    def test_unknown_resume(self):
        with patch(POST_TARGET) as post:
            with pytest.raises(ResumeNotFoundError):
                compile_and_save_resume(42, USER, "x")
        post.assert_not_called()
