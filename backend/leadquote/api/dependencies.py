from leadquote.services.distance_service import DistanceProvider, get_distance_provider


def get_provider() -> DistanceProvider:
    """Distance provider for the request; overridden in tests."""
    return get_distance_provider()
