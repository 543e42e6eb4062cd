from django.contrib.auth.hashers import make_password, check_password
from django.core.exceptions import ValidationError
from django.db import models


def validate_pin_format(raw_pin):
    if not (isinstance(raw_pin, str) and len(raw_pin) == 4 and raw_pin.isdigit()):
        raise ValidationError("PIN must be exactly 4 digits.")


class StaffMember(models.Model):
    """
    Front-of-house staff who log in at a table with a 4-digit PIN.
    The PIN is only ever stored hashed.
    """

    name = models.CharField(max_length=150)
    pin = models.CharField(max_length=128, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "staff member"
        verbose_name_plural = "staff members"

    def __str__(self):
        return self.name

    def set_pin(self, raw_pin):
        raw_pin = str(raw_pin) if raw_pin is not None else None
        validate_pin_format(raw_pin)
        self.pin = make_password(raw_pin)
        if self.pk:
            self.save(update_fields=["pin", "updated_at"])

    def check_pin(self, raw_pin):
        if not self.pin or not raw_pin:
            return False
        return check_password(str(raw_pin), self.pin)
