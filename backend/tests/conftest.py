from pathlib import Path
from dotenv import load_dotenv
import fakeredis
import pytest

# Load environment variables for tests before the app settings are imported
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from leadquote.utils import redis_cache


@pytest.fixture
def fake_redis(monkeypatch):
    """Route distance caching to an in-memory Redis."""
    fake = fakeredis.FakeStrictRedis(decode_responses=True)
    monkeypatch.setattr(redis_cache, "get_redis_client", lambda: fake)
    return fake


@pytest.fixture
def fence_calculator():
    """Fence-installation pricing calculator as authored in the dashboard."""
    return {
        "basePricing": {
            "service_field": "service",
            "prices": {
                "Wood Fence Installation": {"amount": 25, "unit": "linear_foot", "minCharge": 500},
                "Vinyl Fence Installation": {"amount": 35, "unit": "linear_foot"},
            },
        },
        "modifiers": [],
        "display": {"format": "fixed", "showCalculation": True},
    }
