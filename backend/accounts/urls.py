"""
Accounts app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/accounts/', include('accounts.urls')),

Endpoint Map
------------
    GET    /auth/discord/            → DiscordAuthorizeView
    POST   /auth/discord/callback/   → DiscordCallbackView
    POST   /auth/token/refresh/      → TokenRefreshView (SimpleJWT)
    POST   /auth/logout/             → LogoutView
    GET    /me/                      → MeView
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .views import DiscordAuthorizeView, DiscordCallbackView, LogoutView, MeView

app_name = "accounts"

urlpatterns = [
    path("auth/discord/", DiscordAuthorizeView.as_view(), name="discord-authorize"),
    path("auth/discord/callback/", DiscordCallbackView.as_view(), name="discord-callback"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("me/", MeView.as_view(), name="me"),
]
