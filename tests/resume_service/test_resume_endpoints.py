"""
Unit tests for resume service endpoints.

Tests root, health, optimize-resume and test-html-to-pdf endpoints.
The Gemini client is replaced with a stub and Playwright is mocked.
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.common.error_handling import AIServiceError
from src.resume_pipeline.orchestrator import ResumeOptimizationPipeline

PDF_UPLOAD = ("resume.pdf", b"%PDF-1.4 original resume", "application/pdf")
FENCED_REPLY = '```json\n{"htmlres": "<html><body>Hi</body></html>"}\n```'


class StubAIClient:
    def __init__(self, reply: str = FENCED_REPLY, error: Exception = None):
        self.reply = reply
        self.error = error
        self.seen_paths = []

    async def generate_resume_html(self, resume_path: Path, job_requirements: str) -> str:
        self.seen_paths.append(Path(resume_path))
        assert Path(resume_path).exists()
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    import resume_service.app as app_module
    path = tmp_path / "uploads"
    monkeypatch.setattr(app_module.settings, "upload_dir", str(path))
    return path


@pytest.fixture
def stub_ai():
    return StubAIClient()


@pytest.fixture
def client(upload_dir, stub_ai):
    """Create test client with Playwright marked as ready and a stub AI client."""
    import resume_service.app as app_module
    app_module._playwright_ready = True
    app_module._playwright_error = None

    app_module.app.dependency_overrides[app_module.get_pipeline] = (
        lambda: ResumeOptimizationPipeline(stub_ai)
    )
    yield TestClient(app_module.app)
    app_module.app.dependency_overrides.clear()


@pytest.fixture
def client_playwright_unavailable():
    """Create test client with Playwright marked as unavailable."""
    import resume_service.app as app_module
    app_module._playwright_ready = False
    app_module._playwright_error = "Test: Playwright not available"
    return TestClient(app_module.app)


class TestServiceInfo:
    """Tests for / and unknown routes."""

    def test_root_lists_endpoints(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Resume Optimizer API"
        assert data["endpoints"]["optimize"] == "/api/optimize-resume"

    def test_unknown_route_returns_404(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}


class TestHealthEndpoint:
    """Tests for /api/health endpoint."""

    def test_health_check_returns_200(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200

    def test_health_check_returns_correct_structure(self, client):
        data = client.get("/api/health").json()

        assert data["status"] == "OK"
        assert "timestamp" in data
        assert "version" in data
        assert data["playwright_ready"] is True

    def test_health_check_returns_503_when_playwright_unavailable(self, client_playwright_unavailable):
        response = client_playwright_unavailable.get("/api/health")
        assert response.status_code == 503
        data = response.json()["detail"]
        assert data["status"] == "unhealthy"
        assert data["playwright_ready"] is False
        assert "Playwright not available" in data["playwright_error"]


class TestOptimizeResumeEndpoint:
    """Tests for /api/optimize-resume endpoint."""

    def test_requires_resume_file(self, client):
        response = client.post("/api/optimize-resume", data={"jobRequirements": "Python"})
        assert response.status_code == 400
        assert response.json()["detail"] == "PDF resume file is required"

    def test_requires_job_requirements(self, client):
        response = client.post("/api/optimize-resume", files={"resume": PDF_UPLOAD})
        assert response.status_code == 400
        assert response.json()["detail"] == "Job requirements are required"

    def test_rejects_non_pdf(self, client, stub_ai):
        response = client.post(
            "/api/optimize-resume",
            files={"resume": ("resume.docx", b"PK\x03\x04", "application/octet-stream")},
            data={"jobRequirements": "Python"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Only PDF files are allowed"
        assert stub_ai.seen_paths == []

    def test_rejects_oversized_pdf(self, client, upload_dir, monkeypatch):
        import resume_service.app as app_module
        monkeypatch.setattr(app_module.settings, "max_upload_bytes", 1024)

        response = client.post(
            "/api/optimize-resume",
            files={"resume": ("resume.pdf", b"%PDF" + b"0" * 4096, "application/pdf")},
            data={"jobRequirements": "Python"},
        )
        assert response.status_code == 400
        assert "too large" in response.json()["detail"]
        assert list(upload_dir.iterdir()) == []

    def test_success_returns_pdf_and_cleans_up(self, client, stub_ai, upload_dir, fake_playwright):
        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            response = client.post(
                "/api/optimize-resume",
                files={"resume": PDF_UPLOAD},
                data={"jobRequirements": "Senior Python engineer"},
            )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="optimized-resume.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")
        assert len(stub_ai.seen_paths) == 1
        assert not stub_ai.seen_paths[0].exists()
        assert list(upload_dir.iterdir()) == []

    def test_unrecoverable_reply_returns_500(self, client, stub_ai, upload_dir):
        stub_ai.reply = "Sorry, I can't help with that."

        response = client.post(
            "/api/optimize-resume",
            files={"resume": PDF_UPLOAD},
            data={"jobRequirements": "Python"},
        )

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to process PDF resume"
        assert detail["stage"] == "extract"
        assert "no HTML content recoverable" in detail["message"]
        assert list(upload_dir.iterdir()) == []

    def test_ai_failure_returns_500(self, client, stub_ai, upload_dir):
        stub_ai.error = AIServiceError("Failed to get AI suggestions: quota exceeded")

        response = client.post(
            "/api/optimize-resume",
            files={"resume": PDF_UPLOAD},
            data={"jobRequirements": "Python"},
        )

        assert response.status_code == 500
        assert response.json()["detail"]["stage"] == "ai_call"
        assert list(upload_dir.iterdir()) == []

    def test_render_failure_returns_500(self, client, upload_dir, fake_playwright):
        fake_playwright["page"].set_content = AsyncMock(side_effect=TimeoutError("Timeout 30000ms exceeded"))

        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            response = client.post(
                "/api/optimize-resume",
                files={"resume": PDF_UPLOAD},
                data={"jobRequirements": "Python"},
            )

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["stage"] == "render"
        assert detail["message"].startswith("render failed:")
        fake_playwright["browser"].close.assert_awaited_once()
        assert list(upload_dir.iterdir()) == []


class TestHtmlToPdfEndpoint:
    """Tests for /api/test-html-to-pdf endpoint."""

    def test_requires_html(self, client):
        response = client.post("/api/test-html-to-pdf", json={})
        assert response.status_code == 400
        assert "HTML content is required" in response.json()["detail"]

    def test_rejects_empty_html(self, client):
        response = client.post("/api/test-html-to-pdf", json={"html": "   "})
        assert response.status_code == 400

    def test_success(self, client, fake_playwright):
        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            response = client.post(
                "/api/test-html-to-pdf",
                json={"html": "<!DOCTYPE html><html><body><h1>Test</h1></body></html>"},
            )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="test-document.pdf"' in response.headers["content-disposition"]
        assert fake_playwright["page"].pdf.call_args.kwargs["page_ranges"] == "1"

    def test_render_failure_returns_500(self, client, fake_playwright):
        fake_playwright["page"].pdf = AsyncMock(side_effect=RuntimeError("Target closed"))

        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            response = client.post("/api/test-html-to-pdf", json={"html": "<h1>Test</h1>"})

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "Failed to convert HTML to PDF"
        assert "Target closed" in detail["message"]


class TestStartupValidation:
    """Tests for the startup Playwright check."""

    @pytest.mark.asyncio
    async def test_marks_playwright_ready(self, upload_dir, fake_playwright):
        import resume_service.app as app_module
        app_module._playwright_ready = False

        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            await app_module.validate_environment_on_startup()

        assert app_module._playwright_ready is True
        assert app_module._playwright_error is None
        assert upload_dir.is_dir()
        fake_playwright["browser"].close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_records_launch_failure(self, upload_dir, fake_playwright):
        import resume_service.app as app_module
        app_module._playwright_ready = False
        fake_playwright["chromium"].launch = AsyncMock(side_effect=RuntimeError("Executable doesn't exist"))

        with patch("playwright.async_api.async_playwright", fake_playwright["factory"]):
            await app_module.validate_environment_on_startup()

        assert app_module._playwright_ready is False
        assert "Executable doesn't exist" in app_module._playwright_error
