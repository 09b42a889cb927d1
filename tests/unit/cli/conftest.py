"""Fixtures for CLI command tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from pytest_mock import MockerFixture

from steer_dashboard.integrations.steer import SteerClient
from steer_dashboard.integrations.steer.models import ResourceKind

Handler = Callable[[httpx.Request], httpx.Response]
DocumentFactory = Callable[..., dict[str, Any]]

API_PREFIX = "/api/v1"


class FakeBackend:
    """In-memory Steer backend answering the client's HTTP calls."""

    def __init__(self, release_doc: DocumentFactory, job_doc: DocumentFactory) -> None:
        self.releases: list[dict[str, Any]] = [
            release_doc("web"),
            release_doc("api", namespace="staging", phase="Failed"),
        ]
        self.jobs: list[dict[str, Any]] = [
            job_doc("smoke", phase="Succeeded"),
            job_doc("load", phase="Failed", release=("prod", "gone")),
        ]
        self.requests: list[httpx.Request] = []
        self.error: tuple[int, dict[str, Any] | str] | None = None
        self.unreachable = False
        self.failing: set[ResourceKind] = set()

    def _collection(self, kind: str) -> list[dict[str, Any]]:
        return self.releases if kind == ResourceKind.RELEASE.value else self.jobs

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)
        if self.error is not None:
            status, body = self.error
            if isinstance(body, str):
                return httpx.Response(status, text=body)
            return httpx.Response(status, json=body)

        parts = request.url.path.removeprefix(API_PREFIX).strip("/").split("/")
        if any(kind.value == parts[0] for kind in self.failing):
            return httpx.Response(500, json={"error": f"{parts[0]} unavailable"})
        items = self._collection(parts[0])

        if request.method == "GET" and len(parts) == 1:
            return httpx.Response(200, json=items)
        if request.method == "POST":
            document = json.loads(request.content)
            items.append(document)
            return httpx.Response(201, json=document)

        namespace, name = parts[1], parts[2]
        for document in items:
            meta = document["metadata"]
            if (meta["namespace"], meta["name"]) == (namespace, name):
                if request.method == "DELETE":
                    items.remove(document)
                    return httpx.Response(204)
                return httpx.Response(200, json=document)
        return httpx.Response(404, json={"error": f"{name} not found"})

    def sent(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def backend(
    mocker: MockerFixture,
    make_client: Callable[[Handler], SteerClient],
    release_doc: DocumentFactory,
    job_doc: DocumentFactory,
) -> FakeBackend:
    """Route every CLI command's client to a fake backend."""
    fake = FakeBackend(release_doc, job_doc)
    mocker.patch(
        "steer_dashboard.cli.commands.base.create_client",
        side_effect=lambda config: make_client(fake),
    )
    return fake
