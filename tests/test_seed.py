"""Sample data loading."""
from shipyard.seed import seed_sample_data


def test_seed_populates_store(storage):
    assert seed_sample_data(storage) is True

    projects = {p.name: p for p in storage.get_projects()}
    assert set(projects) == {"Personal Portfolio", "E-commerce Dashboard", "API Service"}
    assert projects["E-commerce Dashboard"].status == "building"
    assert projects["API Service"].status == "live"

    assert len(storage.get_domains()) == 3
    assert [d.name for d in storage.get_databases()] == ["portfolio_db", "api_db"]
    assert storage.get_user_by_username("admin") is not None
    assert storage.get_latest_system_metrics().network_usage == 246
    assert storage.get_activities(limit=1)[0].description == "Domain configured - api.example.com"


def test_seed_is_skipped_when_projects_exist(storage):
    seed_sample_data(storage)
    assert seed_sample_data(storage) is False
    assert len(storage.get_projects()) == 3
