"""Shared test fixtures and configuration."""

from datetime import datetime, timezone
import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


TEST_ENV = {
    "DASHBOARD_QUERY_DEBOUNCE_MS": "0",
    "DASHBOARD_QUERY_LOG_LEVEL": "debug",
    "DASHBOARD_QUERY_LOG_JSON": "false",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value

from dashboard_query.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset DASHBOARD_QUERY_* variables and the cached settings for every test."""
    for key in list(os.environ):
        if key.startswith("DASHBOARD_QUERY_"):
            monkeypatch.delenv(key, raising=False)
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with synchronous recompute and a temporary storage directory."""
    return Settings(debounce_ms=0, saved_search_dir=tmp_path / "store")


@pytest.fixture
def name_records():
    """The three-customer list used in the search scenarios."""
    return [
        {"name": "Rahul Sharma"},
        {"name": "Rahul Verma"},
        {"name": "Priya Patel"},
    ]


@pytest.fixture
def customer_records():
    """CRM customers as the admin dashboard table receives them."""
    return [
        {
            "id": "C-1001",
            "name": "Rahul Sharma",
            "segment": "VIP",
            "totalValue": 450000,
            "lastInteraction": datetime(2024, 3, 2, tzinfo=timezone.utc),
            "contact": {"email": "rahul.sharma@example.in", "city": "Mumbai"},
            "tags": ["gold-loan", "repeat"],
        },
        {
            "id": "C-1002",
            "name": "Priya Patel",
            "segment": "Regular",
            "totalValue": 150000,
            "lastInteraction": datetime(2024, 2, 14, tzinfo=timezone.utc),
            "contact": {"email": "priya.patel@example.in", "city": "Ahmedabad"},
            "tags": ["personal-loan"],
        },
        {
            "id": "C-1003",
            "name": "Amit Kumar",
            "segment": "VIP",
            "totalValue": 300000,
            "lastInteraction": None,
            "contact": {"email": "amit.kumar@example.in", "city": "Delhi"},
            "tags": [],
        },
        {
            "id": "C-1004",
            "name": "Sneha Reddy",
            "segment": "New",
            "totalValue": 50000,
            "lastInteraction": datetime(2024, 3, 20, tzinfo=timezone.utc),
            "contact": {"email": "sneha.reddy@example.in", "city": "Hyderabad"},
            "tags": ["business-loan"],
        },
    ]
