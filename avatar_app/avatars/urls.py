from django.urls import path

from avatars import views, views_health

urlpatterns = [
    path("healthz", views_health.healthz, name="healthz"),
    path("readyz", views_health.readyz, name="readyz"),
    path("avatar/<str:username>/", views.placeholder_avatar, name="placeholder-avatar-native"),
    path("avatar/<str:username>/<int:size>/", views.placeholder_avatar, name="placeholder-avatar"),
    path("avatar/<str:username>/<int:size>/dark/", views.placeholder_avatar_dark, name="placeholder-avatar-dark"),
]
