from core_backend.base import BaseModelSerializer
from .models import GlobalSettings


class GlobalSettingsSerializer(BaseModelSerializer):
    class Meta:
        model = GlobalSettings
        fields = [
            "brand_name",
            "currency",
            "tax_rate",
            "service_charge_rate",
            "brand_receipt_footer",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
