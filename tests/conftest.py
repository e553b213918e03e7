"""Shared fixtures: a throwaway SQLite database stands in for MySQL."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from gatekeeper.config import Settings
from gatekeeper.database import Gateway
from gatekeeper.main import create_app
from gatekeeper.services.visitor_service import VisitorRegistry


def make_settings(url, debug=False):
    return Settings(database={"url": url}, **{"global": {"debug": debug}})


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'gatekeeper.db'}"


@pytest.fixture
def gateway(db_url):
    gw = Gateway(db_url)
    gw.create_tables()
    yield gw
    gw.dispose()


@pytest.fixture
def registry(gateway):
    return VisitorRegistry(gateway)


@pytest.fixture
def client(db_url):
    app = create_app(make_settings(db_url))
    with TestClient(app) as c:
        yield c
