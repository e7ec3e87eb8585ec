"""
Pytest configuration and fixtures for the test suite.

Defines markers for selective test execution:
    pytest -m unit          # Fast unit tests
    pytest -m integration   # Tests touching SQLite files or the CLI

Fixtures are centralized in tests/fixtures/ for reuse across all test modules.
"""

import copy
import json
import os
import sys

import pytest

# Add src to path for imports
src_dir = os.path.join(os.path.dirname(__file__), '..', 'src')
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

# Add tests directory to path for fixtures import
tests_dir = os.path.dirname(__file__)
if tests_dir not in sys.path:
    sys.path.insert(1, tests_dir)

from fixtures import (
    USERS_DEPARTMENTS_SCHEMA,
    USERS_DEPARTMENTS_ROWS,
    USERS_MAPPING_CONFIG,
    CLEAN_TTL,
)

from rdb2rdf.core.data_sources import InMemoryDataSource, SqlAlchemyDataSource
from rdb2rdf.shared.models import SchemaSnapshot


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Tests using SQLite databases, files or the CLI")


@pytest.fixture(autouse=True)
def retry_sleeps(monkeypatch):
    """Record database retry waits instead of sleeping through them."""
    sleeps = []
    for fetch in (SqlAlchemyDataSource._fetch_all, SqlAlchemyDataSource._fetch_scalar):
        monkeypatch.setattr(fetch.retry, "sleep", sleeps.append)
    return sleeps


# =============================================================================
# Schema / data source fixtures
# =============================================================================

@pytest.fixture
def users_schema():
    """users(id PK, name, dept_id FK -> departments.id) and departments(id PK, name)."""
    return SchemaSnapshot.from_dict(copy.deepcopy(USERS_DEPARTMENTS_SCHEMA))


@pytest.fixture
def users_source(users_schema):
    """In-memory source with one department (7) and one user (1, Ana)."""
    return InMemoryDataSource(users_schema, copy.deepcopy(USERS_DEPARTMENTS_ROWS))


@pytest.fixture
def users_data_file(tmp_path):
    """JSON export of the users/departments schema and rows."""
    data_file = tmp_path / "company.json"
    data_file.write_text(json.dumps({
        "schema": USERS_DEPARTMENTS_SCHEMA,
        "rows": USERS_DEPARTMENTS_ROWS,
    }, indent=2))
    return str(data_file)


# =============================================================================
# Mapping configuration fixtures
# =============================================================================

@pytest.fixture
def mapping_dict():
    """Mapping configuration covering every object map variant."""
    return copy.deepcopy(USERS_MAPPING_CONFIG)


@pytest.fixture
def mapping_file(tmp_path, mapping_dict):
    mapping_path = tmp_path / "users.mapping.json"
    mapping_path.write_text(json.dumps(mapping_dict, indent=2))
    return str(mapping_path)


# =============================================================================
# RDF fixtures
# =============================================================================

@pytest.fixture
def clean_ttl():
    return CLEAN_TTL


@pytest.fixture
def clean_ttl_file(tmp_path):
    ttl_file = tmp_path / "clean.ttl"
    ttl_file.write_text(CLEAN_TTL)
    return str(ttl_file)
