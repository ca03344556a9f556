import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="VotingSession",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("seed", models.BigIntegerField()),
                ("version", models.PositiveIntegerField()),
                ("talk_ids", models.JSONField()),
                ("fingerprint", models.CharField(max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(
                        fields=["created_at"], name="voting_session_created_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="VoteRecord",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("round_number", models.PositiveIntegerField()),
                ("index_in_round", models.PositiveIntegerField()),
                (
                    "choice",
                    models.CharField(
                        choices=[("A", "Left talk"), ("B", "Right talk"), ("skip", "Skipped")],
                        max_length=4,
                    ),
                ),
                ("version", models.PositiveIntegerField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="votes",
                        to="voting.votingsession",
                    ),
                ),
            ],
            options={
                "ordering": ["round_number", "index_in_round"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("session", "round_number", "index_in_round"),
                        name="unique_vote_per_coordinate",
                    )
                ],
            },
        ),
    ]
