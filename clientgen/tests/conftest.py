"""Shared fixtures: an in-memory fetcher and a small set of documents."""

from __future__ import annotations

import copy
from collections import Counter
from typing import Any

import pytest

from clientgen.model import API_REFERENCE_URL, EXCHANGES_REFERENCE_URL
from clientgen.shared import TransportError

QUEUE_URL = "http://references.example.com/queue/v1/api.json"
EVENTS_URL = "http://references.example.com/queue/v1/exchanges.json"
SCHEMA_BASE = "http://schemas.example.com/queue/v1/"


class FakeFetcher:
    """Serve documents from a dict and record every URL requested.

    Lookups ignore the fragment, like a real HTTP fetch does.
    """

    def __init__(self, documents: dict[str, Any]) -> None:
        self.documents = documents
        self.calls: Counter[str] = Counter()
        self.failing: set[str] = set()

    def __call__(self, url: str) -> Any:
        self.calls[url] += 1
        location = url.split("#", 1)[0]
        if location in self.failing:
            raise TransportError("Request failed: connection refused", url)
        if location not in self.documents:
            raise TransportError("Request failed: 404 Not Found", url)
        return copy.deepcopy(self.documents[location])


def schema(title: str, **extra: Any) -> dict[str, Any]:
    return {"title": title, "type": "object", **extra}


def queue_documents() -> dict[str, Any]:
    return {
        QUEUE_URL: {
            "version": 0,
            "title": "Queue API Documentation",
            "description": "The queue service is responsible for accepting tasks.",
            "baseUrl": "https://queue.example.com/v1",
            "entries": [
                {
                    "type": "function",
                    "method": "get",
                    "route": "/task/<taskId>",
                    "args": ["taskId"],
                    "name": "task",
                    "scopes": [],
                    "output": SCHEMA_BASE + "task.json",
                    "title": "Get Task Definition",
                    "description": "This end-point will return the task-definition.",
                },
                {
                    "type": "function",
                    "method": "put",
                    "route": "/task/<taskId>",
                    "args": ["taskId"],
                    "name": "createTask",
                    "scopes": [["queue:create-task:<provisionerId>/<workerType>"]],
                    "input": SCHEMA_BASE + "create-task-request.json#",
                    "output": SCHEMA_BASE + "task-status-response.json#",
                    "title": "Create New Task",
                    "description": "Create a new task.",
                },
                {
                    "type": "function",
                    "method": "get",
                    "route": "/ping",
                    "args": [],
                    "name": "ping",
                    "title": "Ping Server",
                    "description": "Documented later...",
                },
            ],
        },
        EVENTS_URL: {
            "version": 0,
            "title": "Queue AMQP Exchanges",
            "description": "Exchanges for task events.",
            "exchangePrefix": "exchange/taskcluster-queue/v1/",
            "entries": [
                {
                    "type": "topic-exchange",
                    "exchange": "task-defined",
                    "name": "taskDefined",
                    "title": "Task Defined Messages",
                    "description": "When a task is created a message is posted.",
                    "routingKey": [
                        {
                            "name": "routingKeyKind",
                            "summary": "Identifier for the routing-key kind.",
                            "constant": "primary",
                            "multipleWords": False,
                            "required": True,
                        },
                        {
                            "name": "taskId",
                            "summary": "`taskId` for the task this message concerns",
                            "multipleWords": False,
                            "required": True,
                        },
                        {
                            "name": "reserved",
                            "summary": "Space reserved for future routing-key entries.",
                            "multipleWords": True,
                            "required": False,
                        },
                    ],
                    "schema": SCHEMA_BASE + "task-defined-message.json#",
                },
            ],
        },
        SCHEMA_BASE + "task.json": schema(
            "Task Definition",
            description="Definition of a task.",
            properties={
                "taskGroupId": {"type": "string", "description": "Task group identifier."},
                "dependencies": {"type": "array", "items": {"type": "string"}},
                "metadata": {"$ref": "task-metadata.json#"},
                "payload": {"type": "object"},
            },
            required=["taskGroupId"],
        ),
        SCHEMA_BASE + "task-metadata.json": schema(
            "Task Metadata",
            properties={"name": {"type": "string"}, "owner": {"type": "string"}},
        ),
        SCHEMA_BASE + "create-task-request.json": schema(
            "Task  Definition",
            properties={"metadata": {"$ref": SCHEMA_BASE + "task-metadata.json"}},
        ),
        SCHEMA_BASE + "task-status-response.json": schema(
            "Task Status Response",
            properties={"status": {"$ref": "task-status.json#"}},
        ),
        SCHEMA_BASE + "task-status.json": schema(
            "Task Status Structure",
            properties={
                "taskId": {"type": "string"},
                "runs": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "runId": {"type": "integer"},
                            "state": {"type": "string", "enum": ["pending", "running"]},
                        },
                    },
                },
            },
        ),
        SCHEMA_BASE + "task-defined-message.json": schema(
            "Task Defined Message",
            properties={"status": {"$ref": "task-status.json"}, "version": {"type": "integer"}},
        ),
    }


def manifest() -> list[dict[str, Any]]:
    # declared out of URL order on purpose
    return [
        {"url": EVENTS_URL, "schema": EXCHANGES_REFERENCE_URL, "name": "QueueEvents", "docroot": "http://docs.example.com/queue/exchanges"},
        {"url": QUEUE_URL, "schema": API_REFERENCE_URL, "name": "Queue", "docroot": "http://docs.example.com/queue/api-docs"},
    ]


@pytest.fixture
def documents() -> dict[str, Any]:
    return queue_documents()


@pytest.fixture
def fetcher(documents) -> FakeFetcher:
    return FakeFetcher(documents)


@pytest.fixture
def manifest_data() -> list[dict[str, Any]]:
    return manifest()
