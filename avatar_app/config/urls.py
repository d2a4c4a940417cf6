from django.urls import include, path

urlpatterns = [
    path("", include("avatars.urls")),
]
