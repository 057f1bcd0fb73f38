from __future__ import annotations

import asyncio

import pytest
import strawberry
import structlog

from gqlerr import errors, fields
from gqlerr.extensions import ErrorPresenterExtension, PresentedSchema, RequestPathExtension
from gqlerr.recovery import recover_errors


@strawberry.type
class Muffin:
    id: strawberry.ID

    @strawberry.field
    def flavor(self) -> str | None:
        raise errors.not_found("flavor missing", fields.string("muffin_id", self.id)).with_error_id(
            "unknown_flavor"
        )

    @strawberry.field
    async def price(self) -> int | None:
        raise errors.failed_precondition("price list not loaded").at_info()


@strawberry.type
class Query:
    @strawberry.field
    def muffins(self) -> list[Muffin]:
        return [Muffin(id=strawberry.ID("1")), Muffin(id=strawberry.ID("2"))]

    @strawberry.field
    def broken(self) -> str:
        raise KeyError("muffin")

    @strawberry.field
    @recover_errors
    def crashing(self) -> str:
        raise ZeroDivisionError("division by zero")

    @strawberry.field
    async def slow(self) -> str | None:
        await asyncio.sleep(0.05)
        raise errors.not_found("slow missing")

    @strawberry.field
    async def fast(self) -> str | None:
        raise errors.permission_denied("fast denied")


@pytest.fixture
def schema(logs):
    return PresentedSchema(
        query=Query,
        extensions=[
            RequestPathExtension,
            ErrorPresenterExtension.configure(logger=structlog.get_logger()),
        ],
    )


def test_resolver_errors_are_presented_with_path(schema, logs):
    result = schema.execute_sync("{ muffins { id flavor } }")

    assert [error.formatted for error in result.errors] == [
        {
            "message": "not found",
            "locations": [{"line": 1, "column": 16}],
            "path": ["muffins", 0, "flavor"],
            "extensions": {"code": "not_found", "error_reason": "unknown_flavor"},
        },
        {
            "message": "not found",
            "locations": [{"line": 1, "column": 16}],
            "path": ["muffins", 1, "flavor"],
            "extensions": {"code": "not_found", "error_reason": "unknown_flavor"},
        },
    ]
    assert [(entry["log_level"], entry["gql_path"], entry["muffin_id"]) for entry in logs] == [
        ("warning", "muffins[0].flavor", "1"),
        ("warning", "muffins[1].flavor", "2"),
    ]


def test_async_resolver_errors_capture_path(schema, logs):
    result = asyncio.run(schema.execute("{ muffins { price } }"))

    assert sorted(tuple(error.path) for error in result.errors) == [
        ("muffins", 0, "price"),
        ("muffins", 1, "price"),
    ]
    assert {error.extensions["code"] for error in result.errors} == {"failed_precondition"}
    assert sorted(entry["gql_path"] for entry in logs) == ["muffins[0].price", "muffins[1].price"]
    assert {entry["log_level"] for entry in logs} == {"info"}


def test_unclassified_errors_become_internal(schema, logs):
    result = schema.execute_sync("{ broken }")

    assert result.errors[0].formatted["message"] == "internal error"
    assert result.errors[0].extensions == {"code": "internal"}
    assert result.errors[0].path == ["broken"]
    assert len(logs) == 1
    assert logs[0]["event"] == "received error that was not of type GQLError"
    assert logs[0]["type"] == "builtins.KeyError"


def test_recovered_crash_logs_at_panic(schema, logs):
    result = schema.execute_sync("{ crashing }")

    assert result.errors[0].extensions == {"code": "internal"}
    assert [entry["log_level"] for entry in logs] == ["critical"]
    assert logs[0]["gql_path"] == "crashing"
    assert logs[0]["recover"] == "division by zero"
    assert "ZeroDivisionError" in logs[0]["event"]


def test_validation_errors_are_left_alone(schema, logs):
    result = schema.execute_sync("{ doesNotExist }")

    assert "doesNotExist" in result.errors[0].message
    assert result.errors[0].extensions is None or "code" not in result.errors[0].extensions
    assert logs == []


def test_graphql_router_response(schema, logs):
    fastapi = pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient
    from strawberry.fastapi import GraphQLRouter

    app = fastapi.FastAPI()
    app.include_router(GraphQLRouter(schema), prefix="/graphql")
    client = TestClient(app)

    response = client.post("/graphql", json={"query": "{ muffins { flavor } }"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["data"] == {"muffins": [{"flavor": None}, {"flavor": None}]}
    assert payload["errors"][0]["extensions"] == {
        "code": "not_found",
        "error_reason": "unknown_flavor",
    }
    assert payload["errors"][0]["path"] == ["muffins", 0, "flavor"]


def test_concurrent_operations_present_their_own_errors(schema, logs):
    async def run_both():
        return await asyncio.gather(
            schema.execute("{ slow }"),
            schema.execute("{ fast }"),
        )

    slow, fast = asyncio.run(run_both())

    assert [error.formatted for error in slow.errors] == [
        {
            "message": "not found",
            "locations": [{"line": 1, "column": 3}],
            "path": ["slow"],
            "extensions": {"code": "not_found"},
        }
    ]
    assert [error.formatted for error in fast.errors] == [
        {
            "message": "permission denied",
            "locations": [{"line": 1, "column": 3}],
            "path": ["fast"],
            "extensions": {"code": "permission_denied"},
        }
    ]
    assert sorted(entry["event"] for entry in logs) == ["fast denied", "slow missing"]


def test_extension_class_uses_configured_logger(logs):
    schema = PresentedSchema(query=Query, extensions=[RequestPathExtension, ErrorPresenterExtension])

    result = schema.execute_sync("{ muffins { flavor } }")

    assert {error.extensions["code"] for error in result.errors} == {"not_found"}
    assert [entry["event"] for entry in logs] == ["flavor missing", "flavor missing"]


def test_configure_with_presenter():
    seen = []

    def presenter(err):
        seen.append(err)
        return err.to_graphql_error()

    extension = ErrorPresenterExtension.configure(presenter)
    schema = PresentedSchema(query=Query, extensions=[RequestPathExtension, extension])

    result = schema.execute_sync("{ muffins { flavor } }")

    assert issubclass(extension, ErrorPresenterExtension)
    assert len(seen) == 2
    assert result.errors[0].extensions == {"code": "not_found", "error_reason": "unknown_flavor"}
