import time

from fastapi.testclient import TestClient

from app.ingest import Aggregator
from app.main import create_app

from conftest import FakeSource, make_article


def _client(*sources) -> TestClient:
    return TestClient(create_app(Aggregator(list(sources)), schedule=False))


def test_articles_empty_before_first_cycle():
    with _client(FakeSource("A", [make_article("http://x/1")])) as client:
        r = client.get("/api/articles")
    assert r.status_code == 200
    assert r.json() == {"articles": []}


def test_articles_after_cycle():
    a = make_article("http://x/1", source="A", title="བོད་", language="bo", image_url="http://img/1.jpg")
    app = create_app(Aggregator([FakeSource("A", [a])]), schedule=False)
    app.state.aggregator.run_cycle()

    with TestClient(app) as client:
        data = client.get("/api/articles").json()

    assert list(data) == ["articles"]
    [item] = data["articles"]
    assert item == {
        "id": "test-http://x/1",
        "title": "བོད་",
        "excerpt": "",
        "image_url": "http://img/1.jpg",
        "source": "A",
        "source_url": "http://x/1",
        "category": "tibet",
        "region": "global",
        "published_at": None,
        "scraped_at": "2024-01-01T00:00:00+00:00",
        "language": "bo",
    }


def test_missing_title_is_serialized_as_null():
    a = make_article("http://x/1", title=None)
    app = create_app(Aggregator([FakeSource("A", [a])]), schedule=False)
    app.state.aggregator.run_cycle()
    with TestClient(app) as client:
        [item] = client.get("/api/articles").json()["articles"]
    assert item["title"] is None


def test_failed_source_is_not_an_api_error():
    app = create_app(
        Aggregator([FakeSource("Bad", error=RuntimeError("down")), FakeSource("Ok", [make_article("http://x/1", source="Ok")])]),
        schedule=False,
    )
    app.state.aggregator.run_cycle()
    with TestClient(app) as client:
        r = client.get("/api/articles")
    assert r.status_code == 200
    assert [a["source"] for a in r.json()["articles"]] == ["Ok"]


def test_health():
    app = create_app(Aggregator([FakeSource("A", [make_article("http://x/1", source="A")])]), schedule=False)
    with TestClient(app) as client:
        before = client.get("/health").json()
        app.state.aggregator.run_cycle()
        after = client.get("/health").json()

    assert before == {"ok": True, "articles": 0, "refreshed_at": None, "sources": {}}
    assert after["articles"] == 1
    assert after["sources"] == {"A": 1}
    assert after["refreshed_at"]


def test_cors_allows_any_origin():
    with _client() as client:
        r = client.get("/api/articles", headers={"Origin": "https://example.org"})
    assert r.headers["access-control-allow-origin"] == "*"


def test_startup_runs_first_cycle_when_scheduled():
    src = FakeSource("A", [make_article("http://x/1", source="A")])
    app = create_app(Aggregator([src]), schedule=True)
    with TestClient(app) as client:
        sched = app.state.scheduler
        assert sched is not None and sched.running
        for _ in range(100):
            if client.get("/api/articles").json()["articles"]:
                break
            time.sleep(0.05)
        assert src.calls >= 1
        assert len(client.get("/api/articles").json()["articles"]) == 1
    assert app.state.scheduler is None
