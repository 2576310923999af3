from .tries import TryListCreateView, TryDetailView, TryStatusView
from .participants import (
    ApplyToTryView,
    JoinTryView,
    CancelParticipationView,
    ParticipantDecisionView,
    TryParticipantsView,
    MyApplicationsView,
)
from .comments import TryCommentListCreateView
from .drafts import TryDraftView
from .completion import CompleteTryView, TryReviewListCreateView
