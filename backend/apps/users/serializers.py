from rest_framework import serializers

from apps.catalog.serializers import MAX_ID


class RoleSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    authority = serializers.CharField(read_only=True)


class UserSerializer(serializers.Serializer):
    """Read and update shape of a user; the password never leaves the server."""

    id = serializers.IntegerField(read_only=True)
    firstName = serializers.CharField(source="first_name", max_length=150)
    lastName = serializers.CharField(
        source="last_name", max_length=150, required=False, allow_blank=True, default=""
    )
    email = serializers.EmailField()
    roles = RoleSerializer(many=True, required=False, default=list)

    def validate_firstName(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("Required field")
        return value


class UserInsertSerializer(UserSerializer):
    password = serializers.CharField(
        write_only=True, min_length=6, trim_whitespace=False
    )
