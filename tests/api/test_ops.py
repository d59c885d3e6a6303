"""Tests for operator endpoints guarding the failure counter."""

from httpx import ASGITransport, AsyncClient

from accounts.main import create_app

OPS_SECRET = "ops-test-secret"


async def test_ops_disabled_without_secret(client: AsyncClient) -> None:
    response = await client.get("/api/v1/ops/failures", headers={"X-Ops-Secret": "x"})
    assert response.status_code == 503


async def test_ops_counter_read_and_reset(
    make_settings, fake_cache, user_repository, terminator
) -> None:
    app = create_app(
        make_settings(ops_secret=OPS_SECRET),
        cache=fake_cache,
        user_repository=user_repository,
        terminate=terminator,
    )

    @app.get("/boom")
    async def boom():
        raise ValueError("nope")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        await c.get("/boom")
        await c.get("/boom")

        forbidden = await c.get("/api/v1/ops/failures", headers={"X-Ops-Secret": "wrong"})
        assert forbidden.status_code == 403

        headers = {"X-Ops-Secret": OPS_SECRET}
        current = await c.get("/api/v1/ops/failures", headers=headers)
        assert current.status_code == 200
        assert current.json()["data"] == {"count": 2, "threshold": 10}

        reset = await c.post("/api/v1/ops/failures/reset", headers=headers)
        assert reset.status_code == 200
        assert app.state.governor.counter.value == 0
