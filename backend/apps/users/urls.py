from django.urls import path

from .views import UserDetailView, UserListView

urlpatterns = [
    path("users", UserListView.as_view(), name="api-users-list"),
    path("users/<int:user_id>", UserDetailView.as_view(), name="api-users-detail"),
]
