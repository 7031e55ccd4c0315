from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from bucket_lister.domain.bucket import BucketListing, BucketSummary
from bucket_lister.errors import NoCredentialsAvailableError
from bucket_lister.infrastructure.http.middleware import method_guard_middleware
from bucket_lister.infrastructure.http.routes import (
    BucketRouteDeps,
    add_bucket_routes,
    add_error_handlers,
    add_page_routes,
)


class StubListBuckets:
    def __init__(self, result: BucketListing | Exception) -> None:
        self._result = result
        self.calls = 0

    def execute(self) -> BucketListing:
        self.calls += 1
        if isinstance(self._result, Exception):
            raise self._result
        return self._result


def _app(use_case: StubListBuckets) -> FastAPI:
    app = FastAPI()
    app.middleware("http")(method_guard_middleware)
    add_error_handlers(app)
    add_page_routes(app)
    add_bucket_routes(app, lambda: BucketRouteDeps(list_buckets=use_case))
    return app


def _listing() -> BucketListing:
    return BucketListing(
        project_id="demo-project",
        buckets=(
            BucketSummary(
                name="alpha",
                location="US",
                created="2024-01-02T03:04:05.000Z",
                storage_class="STANDARD",
                id="alpha",
            ),
            BucketSummary(name="beta", location=None, created=None, storage_class=None, id="beta"),
        ),
    )


def test_index_serves_html_page() -> None:
    client = TestClient(_app(StubListBuckets(_listing())))

    response = client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/api/buckets" in response.text


def test_bucket_listing_response_shape() -> None:
    client = TestClient(_app(StubListBuckets(_listing())))

    response = client.get("/api/buckets")

    assert response.status_code == 200
    assert response.json() == {
        "message": "GCS Buckets in the authenticated project",
        "count": 2,
        "buckets": [
            {
                "name": "alpha",
                "location": "US",
                "created": "2024-01-02T03:04:05.000Z",
                "storageClass": "STANDARD",
                "id": "alpha",
            },
            {"name": "beta", "location": None, "created": None, "storageClass": None, "id": "beta"},
        ],
    }


def test_failure_returns_error_body() -> None:
    use_case = StubListBuckets(NoCredentialsAvailableError("No authentication method available."))
    client = TestClient(_app(use_case))

    response = client.get("/api/buckets")

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to retrieve GCS buckets",
        "details": "No authentication method available.",
    }


def test_unexpected_exceptions_are_reported_the_same_way() -> None:
    client = TestClient(_app(StubListBuckets(KeyError("items"))))

    response = client.get("/api/buckets")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to retrieve GCS buckets"


def test_each_request_runs_the_use_case() -> None:
    use_case = StubListBuckets(_listing())
    client = TestClient(_app(use_case))

    client.get("/api/buckets")
    client.get("/api/buckets")

    assert use_case.calls == 2


def test_non_get_methods_are_rejected_on_every_path() -> None:
    use_case = StubListBuckets(_listing())
    client = TestClient(_app(use_case))

    for method, path in [("POST", "/api/buckets"), ("DELETE", "/"), ("PUT", "/unknown")]:
        response = client.request(method, path)
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}

    assert use_case.calls == 0


def test_unknown_path_returns_plain_not_found() -> None:
    client = TestClient(_app(StubListBuckets(_listing())))

    response = client.get("/api/buckets/extra")

    assert response.status_code == 404
    assert response.text == "Not Found"
    assert response.headers["content-type"].startswith("text/plain")
