"""Sessionize "all sessions" endpoint client."""

import logging
from collections.abc import Iterable

import httpx
from django.core.cache import cache
from rest_framework import serializers

from voting.domain import Talk, TalkId
from voting.domain.errors import TalkSourceError
from voting.sources.interfaces import TalkSource

logger = logging.getLogger(__name__)


class _NamedSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()


class _CategorySerializer(serializers.Serializer):
    name = serializers.CharField()
    categoryItems = _NamedSerializer(many=True)


class _SessionSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True, allow_blank=True, required=False)
    isServiceSession = serializers.BooleanField(default=False)
    isPlenumSession = serializers.BooleanField(default=False)
    speakers = _NamedSerializer(many=True, default=list)
    categories = _CategorySerializer(many=True, default=list)


class _SessionGroupSerializer(serializers.Serializer):
    sessions = _SessionSerializer(many=True)


class SessionizeTalkSource(TalkSource):
    """Talk source backed by a Sessionize sessions endpoint.

    Service and plenum sessions are excluded. Tags are the items of the
    categories named in ``tag_categories``. Results are cached for
    ``cache_seconds``.
    """

    def __init__(
        self,
        endpoint: str,
        tag_categories: Iterable[str] = (),
        cache_seconds: int = 300,
        client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._tag_categories = frozenset(tag_categories)
        self._cache_seconds = cache_seconds
        self._client = client

    @property
    def cache_key(self) -> str:
        return f"voting:talks:{self._endpoint}"

    def list_talks(self) -> list[Talk]:
        talks = cache.get(self.cache_key)
        if talks is None:
            talks = self._parse(self._fetch())
            cache.set(self.cache_key, talks, self._cache_seconds)
        return talks

    def _fetch(self) -> object:
        if not self._endpoint:
            logger.error("No talk source endpoint configured")
            raise TalkSourceError()
        try:
            if self._client is not None:
                response = self._client.get(self._endpoint)
            else:
                with httpx.Client(timeout=10.0) as client:
                    response = client.get(self._endpoint)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Failed to fetch talks from %s: %s", self._endpoint, exc)
            raise TalkSourceError() from exc

    def _parse(self, payload: object) -> list[Talk]:
        serializer = _SessionGroupSerializer(data=payload, many=True)
        if not serializer.is_valid():
            logger.warning("Unexpected talk source payload: %s", serializer.errors)
            raise TalkSourceError()

        talks: dict[str, Talk] = {}
        for group in serializer.validated_data:
            for session in group["sessions"]:
                if session["isServiceSession"] or session["isPlenumSession"]:
                    continue
                talks[session["id"]] = Talk(
                    id=TalkId(session["id"]),
                    title=session["title"],
                    description=session.get("description"),
                    speakers=tuple(speaker["name"] for speaker in session["speakers"]),
                    tags=tuple(
                        item["name"]
                        for category in session["categories"]
                        if category["name"] in self._tag_categories
                        for item in category["categoryItems"]
                    ),
                )
        return sorted(talks.values(), key=lambda talk: talk.id.value)
