from django.urls import path

from .views import DMRoomListCreateView, DMMessageListCreateView

urlpatterns = [
    path("rooms/", DMRoomListCreateView.as_view(), name="dm-room-list"),
    path("rooms/<int:room_id>/messages/", DMMessageListCreateView.as_view(), name="dm-room-messages"),
]
