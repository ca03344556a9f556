"""Pytest configuration and shared fixtures."""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from tests.fakes import StaticTalkSource, make_talks
from voting.services import factory


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def voting_open(settings):
    now = timezone.now()
    settings.VOTING_OPENS = (now - timedelta(days=1)).isoformat()
    settings.VOTING_CLOSES = (now + timedelta(days=1)).isoformat()


@pytest.fixture
def talk_source(monkeypatch) -> StaticTalkSource:
    """Ten talks served to the views in place of Sessionize."""
    source = StaticTalkSource(make_talks(10))
    monkeypatch.setattr(factory, "get_talk_source", lambda: source)
    return source
