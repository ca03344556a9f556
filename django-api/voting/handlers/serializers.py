"""Serializers for request validation and for rendering domain models."""

from django.conf import settings
from rest_framework import serializers

from voting.domain import Choice, Coordinate


class _CoordinateInputMixin:
    """Upper bound on coordinates, read from settings at validation time."""

    def _check_bound(self, value: int) -> int:
        if value > settings.VOTING_MAX_COORDINATE:
            raise serializers.ValidationError("Out of range")
        return value


class BatchQuerySerializer(serializers.Serializer):
    """Query parameters of GET /api/voting/batch."""

    fromRound = serializers.IntegerField(min_value=0)
    fromIndex = serializers.IntegerField(min_value=0)
    size = serializers.IntegerField(min_value=1, required=False)

    def validate_size(self, value: int) -> int:
        return min(value, settings.VOTING_BATCH_MAX_SIZE)

    @property
    def start(self) -> Coordinate:
        return Coordinate(self.validated_data["fromRound"], self.validated_data["fromIndex"])

    @property
    def batch_size(self) -> int:
        return self.validated_data.get("size", settings.VOTING_BATCH_DEFAULT_SIZE)


class VoteFormSerializer(serializers.Serializer):
    """Payload shape of POST /api/voting/vote."""

    vote = serializers.ChoiceField(choices=[choice.value for choice in Choice])
    roundNumber = serializers.IntegerField()
    indexInRound = serializers.IntegerField()


class VoteRangeSerializer(_CoordinateInputMixin, serializers.Serializer):
    """Numeric ranges of POST /api/voting/vote, checked after the shape."""

    roundNumber = serializers.IntegerField(min_value=0)
    indexInRound = serializers.IntegerField(min_value=0)

    def validate_roundNumber(self, value: int) -> int:
        return self._check_bound(value)

    def validate_indexInRound(self, value: int) -> int:
        return self._check_bound(value)


class CoordinateSerializer(serializers.Serializer):
    """Serializer for Coordinate value objects."""

    roundNumber = serializers.IntegerField(source="round_number")
    indexInRound = serializers.IntegerField(source="index_in_round")


class TalkSerializer(serializers.Serializer):
    """Serializer for Talk domain model."""

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    speakers = serializers.ListField(child=serializers.CharField())
    tags = serializers.ListField(child=serializers.CharField())


class TalkPairSerializer(serializers.Serializer):
    """Serializer for TalkPair; talk details come from the ``talks`` context."""

    roundNumber = serializers.IntegerField(source="coordinate.round_number")
    indexInRound = serializers.IntegerField(source="coordinate.index_in_round")
    left = serializers.SerializerMethodField()
    right = serializers.SerializerMethodField()

    def get_left(self, pair) -> dict:
        return TalkSerializer(self.context["talks"][pair.left]).data

    def get_right(self, pair) -> dict:
        return TalkSerializer(self.context["talks"][pair.right]).data


class RankedTalkSerializer(serializers.Serializer):
    """Serializer for RankedTalk domain model."""

    rank = serializers.IntegerField()
    talk = TalkSerializer()
    votes = serializers.IntegerField()


def coordinate_data(coordinate: Coordinate | None) -> dict | None:
    return CoordinateSerializer(coordinate).data if coordinate is not None else None
