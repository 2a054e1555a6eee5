# api/serializers.py
"""
Input serializers for the JSON proxy endpoints.
Responses are never serialized here: every view answers with the action envelope.
"""
from __future__ import annotations

from typing import Any, Dict

from rest_framework import serializers


class CartItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, default=1)
    size = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    has_sizes = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        if attrs.get("has_sizes") and not attrs.get("size"):
            raise serializers.ValidationError({"size": "Please select a size."})
        return attrs


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    size = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class WishlistItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)


class ReviewSerializer(serializers.Serializer):
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "min_value": "Rating must be at least 1",
            "max_value": "Rating must be at most 5",
            "required": "Please select a rating",
        },
    )
    comment = serializers.CharField(error_messages={
        "blank": "Please enter a review",
        "required": "Please enter a review",
    })

    def validate_comment(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Please enter a review")
        return value


class ReplySerializer(serializers.Serializer):
    reply = serializers.CharField(error_messages={"blank": "Reply cannot be empty"})


def first_error(errors) -> str:
    """Flatten DRF's nested error dict to its first human message."""
    if isinstance(errors, dict):
        for value in errors.values():
            return first_error(value)
    if isinstance(errors, (list, tuple)) and errors:
        return first_error(errors[0])
    return str(errors)
