from django.urls import path

from messaging.views import ContactShareView, TryChatView
from .models import Try
from .views import (
    TryListCreateView,
    TryDetailView,
    TryStatusView,
    ApplyToTryView,
    JoinTryView,
    CancelParticipationView,
    ParticipantDecisionView,
    TryParticipantsView,
    MyApplicationsView,
    TryCommentListCreateView,
    TryDraftView,
    CompleteTryView,
    TryReviewListCreateView,
)

urlpatterns = [
    path("", TryListCreateView.as_view(), name="try-list"),
    path("draft/", TryDraftView.as_view(), name="try-draft"),
    path("me/applications/", MyApplicationsView.as_view(), name="my-applications"),

    # Participant decisions (organizer)
    path(
        "participants/<int:participant_id>/approve/",
        ParticipantDecisionView.as_view(approve=True),
        name="participant-approve",
    ),
    path(
        "participants/<int:participant_id>/reject/",
        ParticipantDecisionView.as_view(approve=False),
        name="participant-reject",
    ),

    path("<int:try_id>/", TryDetailView.as_view(), name="try-detail"),
    path("<int:try_id>/close/", TryStatusView.as_view(target_status=Try.STATUS_CLOSED), name="try-close"),
    path("<int:try_id>/reopen/", TryStatusView.as_view(target_status=Try.STATUS_OPEN), name="try-reopen"),
    path("<int:try_id>/complete/", CompleteTryView.as_view(), name="try-complete"),

    # Participation
    path("<int:try_id>/apply/", ApplyToTryView.as_view(), name="try-apply"),
    path("<int:try_id>/join/", JoinTryView.as_view(), name="try-join"),
    path("<int:try_id>/cancel/", CancelParticipationView.as_view(), name="try-cancel"),
    path("<int:try_id>/participants/", TryParticipantsView.as_view(), name="try-participants"),

    path("<int:try_id>/comments/", TryCommentListCreateView.as_view(), name="try-comments"),
    path("<int:try_id>/reviews/", TryReviewListCreateView.as_view(), name="try-reviews"),

    # Group chat
    path("<int:try_id>/chat/", TryChatView.as_view(), name="try-chat"),
    path("<int:try_id>/chat/contact-share/", ContactShareView.as_view(), name="try-contact-share"),
]
