from django.urls import path
from ux.views.dashboard import UXDashboardView
from ux.views.matched import UXMatchedTriesView

urlpatterns = [
    path("me/dashboard/", UXDashboardView.as_view(), name="ux-dashboard"),
    path("tries/matched/", UXMatchedTriesView.as_view(), name="ux-matched-tries"),
]
