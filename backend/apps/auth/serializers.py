from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class CatalogTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Obtain pair keyed by e-mail; tokens carry the user's name and authorities."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["first_name"] = user.first_name
        token["authorities"] = user.authorities()
        return token


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()
