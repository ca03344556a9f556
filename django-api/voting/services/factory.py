"""Wiring of the voting service from Django settings."""

from django.conf import settings

from voting.services.voting_service import VotingService
from voting.services.voting_window import VotingWindow
from voting.sources.interfaces import TalkSource
from voting.sources.sessionize import SessionizeTalkSource
from voting.stores.django_store import DjangoVotingStore


def get_talk_source() -> TalkSource:
    return SessionizeTalkSource(
        endpoint=settings.VOTING_TALKS_ENDPOINT,
        tag_categories=settings.VOTING_TAG_CATEGORIES,
        cache_seconds=settings.VOTING_TALKS_CACHE_SECONDS,
    )


def build_voting_service() -> VotingService:
    return VotingService(
        store=DjangoVotingStore(),
        talk_source=get_talk_source(),
        window=VotingWindow.from_settings(),
    )
