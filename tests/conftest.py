import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.routes.optimize import transcoder_factory
from config import Settings
from tests.fakes import FakeTranscoderFactory


@pytest.fixture
def app_settings(tmp_path):
    frontend = tmp_path / "frontend"
    frontend.mkdir()
    (frontend / "index.html").write_text("<html><body>Video Optimizer</body></html>")
    (frontend / "app.js").write_text("console.log('ok');")
    return Settings(
        staging_dir=str(tmp_path / "uploads"),
        frontend_dir=str(frontend),
        cleanup_delay_seconds=3600,
        log_level="WARNING",
    )


@pytest.fixture
def fake_transcoders():
    return FakeTranscoderFactory(output_size=6_000_000)


@pytest.fixture
def app(app_settings, fake_transcoders):
    app = create_app(app_settings)
    app.dependency_overrides[transcoder_factory] = lambda: fake_transcoders
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
