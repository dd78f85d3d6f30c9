"""
Accounts app serializers.

Request and response shapes for the Discord sign-in flow and the current
user profile.  No business logic lives here.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import User


class AuthorizeUrlSerializer(serializers.Serializer):
    authorize_url = serializers.URLField(read_only=True)
    state = serializers.CharField(read_only=True)


class DiscordCallbackSerializer(serializers.Serializer):
    """Body of the OAuth callback: the code Discord handed the browser and the state we issued."""

    code = serializers.CharField(max_length=255)
    state = serializers.CharField(max_length=255)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class UserDetailSerializer(serializers.ModelSerializer):
    """Current user profile as returned by ``/me/`` and the callback."""

    avatar_url = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "discord_id",
            "avatar",
            "avatar_url",
            "role",
            "national_id",
            "date_joined",
        ]
        read_only_fields = fields


class TokenResponseSerializer(serializers.Serializer):
    """JWT pair plus the signed-in user."""

    access = serializers.CharField(read_only=True)
    refresh = serializers.CharField(read_only=True)
    user = UserDetailSerializer(read_only=True)
