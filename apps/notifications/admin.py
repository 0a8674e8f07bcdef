from django.contrib import admin

from .models import SmsLog


@admin.register(SmsLog)
class SmsLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'phone_number', 'delivery_status', 'cost', 'is_read', 'created_at')
    list_filter = ('delivery_status', 'is_read', 'created_at')
    search_fields = ('phone_number', 'message', 'message_id')
    readonly_fields = ('phone_number', 'message', 'message_id', 'cost', 'delivery_status', 'created_at')
