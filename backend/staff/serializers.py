from rest_framework import serializers
from core_backend.base import BaseModelSerializer
from .models import StaffMember, validate_pin_format


class StaffMemberSerializer(BaseModelSerializer):
    """Staff shown on the selection screen. PINs are never serialized."""

    class Meta:
        model = StaffMember
        fields = ["id", "name"]


class StaffMemberCreateSerializer(BaseModelSerializer):
    pin = serializers.CharField(write_only=True, validators=[validate_pin_format])

    class Meta:
        model = StaffMember
        fields = ["id", "name", "pin"]

    def create(self, validated_data):
        pin = validated_data.pop("pin")
        staff = StaffMember(**validated_data)
        staff.set_pin(pin)
        staff.save()
        return staff
