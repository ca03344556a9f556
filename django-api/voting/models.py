"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class VotingSession(models.Model):
    """Persistence model for anonymous voting sessions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    seed = models.BigIntegerField()
    version = models.PositiveIntegerField()
    talk_ids = models.JSONField()
    fingerprint = models.CharField(max_length=64)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["created_at"], name="voting_session_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.id} (v{self.version})"


class VoteRecord(models.Model):
    """Persistence model for individual votes.

    At most one row per (session, round_number, index_in_round).
    """

    class Choice(models.TextChoices):
        A = "A", "Left talk"
        B = "B", "Right talk"
        SKIP = "skip", "Skipped"

    id = models.BigAutoField(primary_key=True)
    session = models.ForeignKey(
        VotingSession, on_delete=models.CASCADE, related_name="votes"
    )
    round_number = models.PositiveIntegerField()
    index_in_round = models.PositiveIntegerField()
    choice = models.CharField(max_length=4, choices=Choice.choices)
    version = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["round_number", "index_in_round"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "round_number", "index_in_round"],
                name="unique_vote_per_coordinate",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.session_id} r{self.round_number}:{self.index_in_round} {self.choice}"
