from django.urls import include, path

urlpatterns = [
    path("", include("apps.catalog.urls")),
    path("", include("apps.users.urls")),
    path("auth/", include("apps.auth.urls")),
]
