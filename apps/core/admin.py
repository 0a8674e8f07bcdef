from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from apps.core.models import Advertisement, Policy, FollowUp, PolicyHistory


class FollowUpInline(admin.StackedInline):
    model = FollowUp
    extra = 0
    fields = ('followup_status', 'notes', 'followed_at', 'followed_by')
    autocomplete_fields = ('followed_by',)


class PolicyHistoryInline(admin.TabularInline):
    model = PolicyHistory
    extra = 0
    fields = ('expiry_date', 'renewed_date', 'created_at')
    readonly_fields = ('created_at',)


@admin.register(Policy)
class PolicyAdmin(SimpleHistoryAdmin):
    list_display = ('id', 'plate', 'owner', 'company', 'start_date', 'expiry_date', 'renewed_date', 'bucket')
    list_filter = ('company', 'expiry_date', 'created_at')
    search_fields = ('plate', 'owner', 'contact', 'company')
    autocomplete_fields = ('created_by', 'updated_by')
    readonly_fields = ('created_at', 'updated_at')
    inlines = [FollowUpInline, PolicyHistoryInline]

    def bucket(self, obj):
        return obj.bucket()

    def has_delete_permission(self, request, obj=None):
        return getattr(request.user, 'role', None) == 'admin' and super().has_delete_permission(request, obj)


@admin.register(FollowUp)
class FollowUpAdmin(admin.ModelAdmin):
    list_display = ('policy', 'followup_status', 'followed_at', 'followed_by')
    list_filter = ('followup_status', 'followed_at')
    search_fields = ('policy__plate', 'policy__owner', 'notes')
    autocomplete_fields = ('policy', 'followed_by')


@admin.register(PolicyHistory)
class PolicyHistoryAdmin(admin.ModelAdmin):
    list_display = ('policy', 'expiry_date', 'renewed_date', 'created_at')
    list_filter = ('renewed_date', 'expiry_date')
    search_fields = ('policy__plate', 'policy__owner')


@admin.register(Advertisement)
class AdvertisementAdmin(admin.ModelAdmin):
    list_display = ('company_name', 'title', 'ad_type', 'is_active', 'created_at')
    list_filter = ('ad_type', 'is_active')
    search_fields = ('company_name', 'title')
    readonly_fields = ('created_at', 'updated_at')
