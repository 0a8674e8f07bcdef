"""
API URL configuration for InsureApp.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from . import views

app_name = 'api'

router = DefaultRouter()
router.register(r'policies', views.PolicyViewSet, basename='policy')
router.register(r'users', views.UserViewSet, basename='user')
router.register(r'ads', views.AdvertisementViewSet, basename='advertisement')

urlpatterns = [
    # Dashboard
    path('summary', views.SummaryView.as_view(), name='summary'),
    path('trends', views.TrendsView.as_view(), name='trends'),
    path('company-distribution', views.CompanyDistributionView.as_view(), name='company-distribution'),
    path('expiry-report', views.ExpiryReportView.as_view(), name='expiry-report'),
    path('expiry-report/export', views.ExpiryReportExportView.as_view(), name='expiry-report-export'),
    path('sidebar-counts', views.SidebarCountsView.as_view(), name='sidebar-counts'),

    # Follow-ups
    path('followup', views.FollowUpView.as_view(), name='followup'),
    path('followup/<int:policy_id>', views.FollowUpDetailView.as_view(), name='followup-detail'),

    # Policy history
    path('policy-history', views.PolicyHistoryView.as_view(), name='policy-history'),
    path('policy-history/expired', views.ExpiredHistoryView.as_view(), name='policy-history-expired'),
    path('policy-history/<int:policy_id>', views.PolicyHistoryDetailView.as_view(), name='policy-history-detail'),

    # SMS logs
    path('sms/logs', views.SmsLogListView.as_view(), name='sms-logs'),
    path('sms/mark-read', views.SmsMarkReadView.as_view(), name='sms-mark-read'),
    path('sms/<int:log_id>/mark-unread', views.SmsMarkUnreadView.as_view(), name='sms-mark-unread'),
    path('sms/<int:log_id>', views.SmsLogDetailView.as_view(), name='sms-log-detail'),

    # Authentication
    path('auth/login', views.LoginView.as_view(), name='login'),
    path('auth/logout', views.LogoutView.as_view(), name='logout'),
    path('auth/me', views.MeView.as_view(), name='me'),
    path('auth/send-otp', views.SendOtpView.as_view(), name='send-otp'),
    path('auth/verify-otp', views.VerifyOtpView.as_view(), name='verify-otp'),
    path('auth/reset-password', views.ResetPasswordView.as_view(), name='reset-password'),

    # Schema
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='api:schema'), name='swagger-ui'),

    path('', include(router.urls)),
]
