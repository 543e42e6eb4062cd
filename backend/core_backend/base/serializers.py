from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer that provides common functionality.
    """

    def validate(self, data):
        """
        Base validation that can be extended by child classes.
        """
        data = super().validate(data)

        # Add any project-wide validation logic here

        return data


class TimestampedSerializer(BaseModelSerializer):
    """
    Serializer for models carrying created_at / updated_at audit fields.
    """

    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
