"""
Admin configuration for User model.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, PasswordOTP


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = [
        'email', 'get_full_name', 'role', 'is_active', 'last_login_at', 'created_at'
    ]
    list_filter = ['is_active', 'role', 'created_at']
    search_fields = ['email', 'first_name', 'last_name', 'phone_number']
    ordering = ['-created_at']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Agency', {
            'fields': ('role', 'phone_number')
        }),
        ('Important Dates', {
            'fields': ('created_at', 'updated_at', 'last_login_at', 'password_last_reset_at'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'password1', 'password2', 'role', 'is_active'),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login_at', 'password_last_reset_at']

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'{count} user(s) activated.')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f'{count} user(s) deactivated.')


@admin.register(PasswordOTP)
class PasswordOTPAdmin(admin.ModelAdmin):
    list_display = ['email', 'expires_at', 'created_at']
    search_fields = ['email']
    readonly_fields = ['email', 'otp', 'expires_at', 'created_at']
