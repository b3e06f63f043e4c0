def test_health_reports_encoders(client, app_settings):
    resp = client.get("/health/")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert set(body["encoders"]) == {"ffmpeg", "handbrake"}
    assert body["pending_cleanups"] == 0


def test_request_id_is_echoed(client):
    resp = client.get("/health/", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"

    resp = client.get("/health/")
    assert resp.headers["X-Request-ID"]


def test_frontend_is_served(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "Video Optimizer" in resp.text

    resp = client.get("/app.js")
    assert "console.log" in resp.text


def test_unknown_routes_fall_back_to_index(client):
    resp = client.get("/some/client/route")

    assert resp.status_code == 200
    assert "Video Optimizer" in resp.text


def test_missing_video_is_404(client):
    assert client.get("/videos/nope.mp4").status_code == 404
