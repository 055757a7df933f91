import logging
import pytest


@pytest.fixture(autouse=True)
def silence_django_request_logger():
    """Reduce noise from expected 4xx in passing tests.

    Many tests intentionally exercise 400/403/404/409 paths to validate
    eligibility and input handling. Django logs these at WARNING via
    'django.request'. Lower that logger to ERROR during tests to avoid
    clutter.
    """
    logger = logging.getLogger("django.request")
    old = logger.level
    logger.setLevel(logging.ERROR)
    try:
        yield
    finally:
        logger.setLevel(old)


@pytest.fixture
def course(db):
    from courses.models import Course

    return Course.objects.create(title="Startup 101", description="Build a company")


@pytest.fixture
def team(course):
    from tests.factories import make_team

    team, _ = make_team(course)
    return team


@pytest.fixture
def founder(team):
    return team.founders.order_by("id").first()


@pytest.fixture
def founder_client(founder):
    from django.test import Client

    c = Client()
    c.force_login(founder.user)
    return c


@pytest.fixture(autouse=True)
def reset_throttle_history():
    """Throttle history lives in the cache; ids are reused across tests."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()
