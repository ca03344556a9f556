from django.contrib import admin

from voting.models import VoteRecord, VotingSession


class VoteRecordInline(admin.TabularInline):
    model = VoteRecord
    extra = 0
    can_delete = False
    readonly_fields = ["round_number", "index_in_round", "choice", "version", "created_at"]


@admin.register(VotingSession)
class VotingSessionAdmin(admin.ModelAdmin):
    list_display = ["id", "version", "fingerprint", "created_at"]
    list_filter = ["version"]
    readonly_fields = ["id", "seed", "version", "talk_ids", "fingerprint", "created_at"]
    inlines = [VoteRecordInline]


@admin.register(VoteRecord)
class VoteRecordAdmin(admin.ModelAdmin):
    list_display = ["session", "round_number", "index_in_round", "choice", "created_at"]
    list_filter = ["choice", "version"]
    search_fields = ["session__id"]
