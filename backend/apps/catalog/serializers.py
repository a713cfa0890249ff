from django.utils import timezone
from rest_framework import serializers

# largest primary key a BigAutoField can hold
MAX_ID = 2**63 - 1


class CategorySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=100)


class CategoryReferenceSerializer(serializers.Serializer):
    """Category entry inside a product payload; only ``id`` is read on write."""

    id = serializers.IntegerField(min_value=1, max_value=MAX_ID)
    name = serializers.CharField(read_only=True)


class ProductSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    imgUrl = serializers.CharField(
        source="img_url", required=False, allow_blank=True, default=""
    )
    date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    categories = CategoryReferenceSerializer(many=True, required=False, default=list)

    def to_representation(self, instance):
        # DTOs carry the price as a string and the date as an ISO string already
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "description": instance.description,
                "price": instance.price,
                "imgUrl": instance.img_url,
                "date": instance.date,
                "categories": [
                    {"id": c.id, "name": c.name} for c in instance.categories
                ],
            }
        return super().to_representation(instance)

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Required field")
        return value

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be positive")
        return value

    def validate_date(self, value):
        if value is not None and value > timezone.now():
            raise serializers.ValidationError("Date cannot be in the future")
        return value
