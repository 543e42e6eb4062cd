from django import forms
from django.contrib import admin
from .models import StaffMember, validate_pin_format


class StaffMemberAdminForm(forms.ModelForm):
    new_pin = forms.CharField(
        required=False,
        max_length=4,
        help_text="Set a new 4-digit PIN. Leave blank to keep the current one.",
        validators=[validate_pin_format],
    )

    class Meta:
        model = StaffMember
        fields = ("name", "is_active")


@admin.register(StaffMember)
class StaffMemberAdmin(admin.ModelAdmin):
    form = StaffMemberAdminForm
    list_display = ("name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)

    def save_model(self, request, obj, form, change):
        new_pin = form.cleaned_data.get("new_pin")
        if new_pin:
            obj.set_pin(new_pin)
        super().save_model(request, obj, form, change)
