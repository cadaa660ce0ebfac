"""HealthService with a real SQLite session and a fake Redis."""

from notus.core.services.health_service import HealthService

from conftest import FakeRedis


async def test_healthy_when_everything_answers(test_session):
    status = await HealthService(test_session, FakeRedis()).get_health_status()
    assert status.status == "healthy"
    assert status.checks["database"]["connected"]
    assert status.checks["redis"]["connected"]


async def test_degraded_without_redis(test_session):
    status = await HealthService(test_session, FakeRedis(available=False)).get_health_status()
    assert status.status == "degraded"
    assert status.checks["redis"]["status"] == "unhealthy"


async def test_unhealthy_without_database():
    class BrokenSession:
        async def execute(self, stmt):
            raise ConnectionError("db down")

    status = await HealthService(BrokenSession(), FakeRedis()).get_health_status()
    assert status.status == "unhealthy"
    assert "db down" in status.checks["database"]["error"]
