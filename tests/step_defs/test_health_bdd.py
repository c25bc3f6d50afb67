"""
BDD step definitions for the probes feature (pytest-bdd).
"""

import asyncio

from httpx import ASGITransport, AsyncClient
from pytest_bdd import parsers, scenarios, then, when

from app.main import app

# Load all scenarios from the feature file
scenarios("../features/health.feature")


async def _send(method: str, path: str) -> dict:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        r = await client.request(method, path)
        return {"status": r.status_code, "body": r.json()}


@when(parsers.parse('I request "{method}" "{path}"'), target_fixture="response")
def request_path(method, path):
    return asyncio.run(_send(method, path))


@then(parsers.parse("the response status should be {status:d}"))
def response_status(response, status):
    assert response["status"] == status


@then(parsers.parse('the response body should have "{key}" equals "{value}"'))
def body_field_equals(response, key, value):
    assert response["body"].get(key) == value
