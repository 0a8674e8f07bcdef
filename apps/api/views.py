"""
RESTful API for InsureApp.

Dashboard aggregates, policy management, follow-ups, policy history, SMS
logs, partner advertisements, authentication and user management. Views
validate input with a serializer, call one service and shape the result;
domain errors are turned into responses by apps.core.error_handlers.api_exception_handler.
"""

import csv
import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.csrf import ensure_csrf_cookie
from django.utils.decorators import method_decorator
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import AdminCanDelete, IsActiveStaff, IsAdminRole, ReadOnlyUnlessManager
from apps.accounts.services import create_user, deactivate_user, otp_service, update_user
from apps.core.dashboard_cache import dashboard_cache
from apps.core.exceptions import UnauthorizedError
from apps.core.models import Policy, PolicyHistory
from apps.core.services import (
    ad_service,
    followup_service,
    lifecycle_service,
    policy_service,
    summary_service,
)
from apps.notifications import services as sms_service
from . import serializers as s

logger = logging.getLogger(__name__)

User = get_user_model()

TREND_POINTS = 12


def _policies(company=None):
    return Policy.objects.for_company(company).with_followup()


# Dashboard
class SummaryView(APIView):
    """Dashboard headline counts."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        data = dashboard_cache.get_or_set(
            'summary',
            lambda: summary_service.summarize(Policy.objects.only('id', 'expiry_date')),
        )
        return Response(s.SummarySerializer(data).data)


class TrendsView(APIView):
    """Active/expired/renewed counts for the last periods, newest first."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        query = s.TrendsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        period = query.validated_data['period']

        def compute():
            renewals = PolicyHistory.objects.filter(renewed_date__isnull=False).values_list('renewed_date', flat=True)
            points = summary_service.trends(
                Policy.objects.only('id', 'expiry_date'),
                period,
                renewals=list(renewals),
            )
            return [
                {'month': p.label, 'active': p.active, 'expired': p.expired, 'renewed': p.renewed}
                for p in reversed(points[-TREND_POINTS:])
            ]

        return Response({'trends': dashboard_cache.get_or_set('trends', compute, period)})


class CompanyDistributionView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request):
        data = dashboard_cache.get_or_set(
            'company-distribution',
            lambda: summary_service.company_distribution(Policy.objects.only('id', 'company')),
        )
        return Response(data)


class ExpiryReportView(APIView):
    """Today/week/month/expired tabs, optionally for one insurer."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        query = s.CompanyQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        company = query.validated_data.get('company') or 'all'

        data = dashboard_cache.get_or_set(
            'expiry-report',
            lambda: summary_service.expiry_report(_policies(company)),
            company.lower(),
        )
        return Response(data)


class ExpiryReportExportView(APIView):
    """One expiry report tab as CSV."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        query = s.ExportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        bucket = query.validated_data['bucket']
        company = query.validated_data.get('company') or 'all'

        rows = summary_service.expiry_report(_policies(company))[bucket]

        response = HttpResponse(content_type='text/csv')
        filename = f"expiry-report-{bucket}-{timezone.localdate().isoformat()}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        writer = csv.writer(response, quoting=csv.QUOTE_ALL)
        writer.writerow(['Plate', 'Owner', 'Contact', 'Company', 'Expiry Date', 'Status'])
        for row in rows:
            writer.writerow([
                row['plate'],
                row['owner'],
                row['contact'],
                row['company'],
                row['expiry_date'].isoformat(),
                row['followup_status'],
            ])

        return response


class SidebarCountsView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request):
        return Response(summary_service.sidebar_counts())


# Follow-ups
class FollowUpView(APIView):
    """List follow-ups or record a status for a policy."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        followups = followup_service.list_followups().select_related('followed_by')
        return Response(s.FollowUpSerializer(followups, many=True).data)

    def post(self, request):
        payload = s.FollowUpInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        followup = followup_service.set_status(
            payload.validated_data['policy_id'],
            payload.validated_data['followup_status'],
            notes=payload.validated_data.get('notes', ''),
            actor=request.user,
        )
        return Response({
            'message': 'Follow-up status saved',
            'followup': s.FollowUpSerializer(followup).data,
        })


class FollowUpDetailView(APIView):
    permission_classes = [IsActiveStaff]

    def delete(self, request, policy_id):
        followup_service.clear_status(policy_id)
        return Response({'message': 'Follow-up status cleared', 'policy_id': int(policy_id)})


# Policies
class PolicyViewSet(viewsets.ModelViewSet):
    """
    Policy management.

    Create/update/delete go through policy_service; dates only change via
    the ``renew`` action. Only Admins may delete.
    """

    serializer_class = s.PolicySerializer
    permission_classes = [AdminCanDelete]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['company']
    search_fields = ['plate', 'owner', 'contact', 'company']
    ordering_fields = ['plate', 'owner', 'company', 'start_date', 'expiry_date', 'created_at']
    ordering = ['expiry_date', 'id']

    def get_queryset(self):
        qs = Policy.objects.with_followup()
        bucket = self.request.query_params.get('bucket')
        if bucket:
            qs = qs.in_bucket(bucket)
        return qs

    def get_object(self):
        return policy_service.get_policy(self.kwargs['pk'])

    def create(self, request, *args, **kwargs):
        payload = s.PolicyWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        policy = policy_service.create_policy(created_by=request.user, **payload.validated_data)
        return Response(self.get_serializer(policy).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        payload = s.PolicyUpdateSerializer(data=request.data, partial=kwargs.get('partial', False))
        payload.is_valid(raise_exception=True)
        policy = policy_service.update_policy(
            policy_id=self.kwargs['pk'],
            updated_by=request.user,
            **payload.validated_data,
        )
        return Response(self.get_serializer(policy).data)

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        policy_service.delete_policy(policy_id=self.kwargs['pk'], actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def renew(self, request, pk=None):
        """Renew an expired policy with new dates."""
        payload = s.RenewSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        policy = lifecycle_service.renew(
            pk,
            payload.validated_data['expiry_date'],
            start_date=payload.validated_data.get('start_date'),
            contact=payload.validated_data.get('contact') or None,
            actor=request.user,
        )
        return Response({
            'message': 'Policy renewed successfully',
            'policy': self.get_serializer(policy).data,
        })

    @action(detail=False, methods=['post'], url_path='import')
    def import_policies(self, request):
        """Bulk upsert by plate."""
        payload = s.PolicyImportSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = policy_service.import_policies(
            rows=payload.validated_data['policies'],
            imported_by=request.user,
        )
        return Response(result)

    @action(detail=False, methods=['post'])
    def broadcast(self, request):
        """Personalised SMS to a list of clients."""
        payload = s.BroadcastSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        result = sms_service.broadcast(
            payload.validated_data['template'],
            payload.validated_data['recipients'],
        )
        return Response(result)


# Policy history
class PolicyHistoryView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request):
        query = s.DateRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        terms = lifecycle_service.history_between(
            query.validated_data.get('start'),
            query.validated_data.get('end'),
        )
        return Response(s.PolicyHistorySerializer(terms, many=True).data)


class ExpiredHistoryView(APIView):
    """Lapsed terms not yet renewed."""
    permission_classes = [IsActiveStaff]

    def get(self, request):
        return Response(s.PolicyHistorySerializer(lifecycle_service.unrenewed_terms(), many=True).data)


class PolicyHistoryDetailView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request, policy_id):
        terms = lifecycle_service.history_for_policy(policy_id).select_related('policy')
        return Response(s.PolicyHistorySerializer(terms, many=True).data)


# SMS logs
class SmsLogListView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request):
        data = sms_service.latest_logs()
        return Response({
            'logs': s.SmsLogSerializer(data['logs'], many=True).data,
            'unread': data['unread'],
        })


class SmsMarkReadView(APIView):
    permission_classes = [IsActiveStaff]

    def put(self, request):
        updated = sms_service.mark_all_read()
        return Response({'message': 'All notifications marked as read', 'updated': updated})


class SmsMarkUnreadView(APIView):
    permission_classes = [IsActiveStaff]

    def put(self, request, log_id):
        log = sms_service.mark_unread(log_id)
        return Response(s.SmsLogSerializer(log).data)


class SmsLogDetailView(APIView):
    permission_classes = [IsActiveStaff]

    def delete(self, request, log_id):
        sms_service.delete_log(log_id)
        return Response({'message': 'Notification deleted'})


# Advertisements
class AdvertisementViewSet(mixins.ListModelMixin, mixins.CreateModelMixin,
                           mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """
    Partner ads for the dashboard.

    ``random`` returns one active ad, or ``null`` when none is active.
    """

    serializer_class = s.AdvertisementSerializer
    permission_classes = [IsActiveStaff]
    pagination_class = None

    def get_queryset(self):
        return ad_service.list_ads()

    def create(self, request, *args, **kwargs):
        payload = s.AdvertisementWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ad = ad_service.create_ad(created_by=request.user, **payload.validated_data)
        return Response(self.get_serializer(ad).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        ad_service.delete_ad(self.kwargs['pk'])
        return Response({'message': 'Ad deleted successfully'})

    @action(detail=False, methods=['get'])
    def random(self, request):
        ad = ad_service.random_active_ad()
        return Response(self.get_serializer(ad).data if ad else None)

    @action(detail=True, methods=['patch'], url_path='status')
    def set_status(self, request, pk=None):
        payload = s.AdvertisementStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        ad = ad_service.set_active(pk, payload.validated_data['is_active'], actor=request.user)
        return Response({'message': 'Ad status updated successfully', 'ad': self.get_serializer(ad).data})


# Authentication
@method_decorator(ensure_csrf_cookie, name='dispatch')
class LoginView(APIView):
    """Session login with email and password."""
    permission_classes = [AllowAny]

    def post(self, request):
        payload = s.LoginSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        email = payload.validated_data['email'].strip().lower()

        user = authenticate(request._request, username=email, password=payload.validated_data['password'])
        if user is None:
            logger.warning(f"Failed login for {email}")
            raise UnauthorizedError('Invalid email or password')

        login(request._request, user)
        return Response({'message': 'Login successful', 'user': s.UserSerializer(user).data})


class LogoutView(APIView):
    permission_classes = [IsActiveStaff]

    def post(self, request):
        logout(request._request)
        return Response({'message': 'Logged out'})


class MeView(APIView):
    permission_classes = [IsActiveStaff]

    def get(self, request):
        return Response(s.UserSerializer(request.user).data)


class SendOtpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        payload = s.EmailSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        otp_service.send_otp(email=payload.validated_data['email'])
        return Response({'message': 'OTP sent'})


class VerifyOtpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        payload = s.VerifyOtpSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        otp_service.verify_otp(**payload.validated_data)
        return Response({'message': 'OTP verified'})


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        payload = s.ResetPasswordSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        otp_service.reset_password(**payload.validated_data)
        return Response({'message': 'Password reset successful'})


# Users
class UserViewSet(viewsets.ModelViewSet):
    """
    Back-office users.

    Admins and Managers manage accounts; DELETE deactivates instead of
    removing the row.
    """

    serializer_class = s.UserSerializer
    permission_classes = [ReadOnlyUnlessManager]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['role', 'is_active']
    search_fields = ['first_name', 'last_name', 'email', 'phone_number']
    ordering_fields = ['first_name', 'last_name', 'email', 'date_joined']
    ordering = ['-date_joined']

    def get_queryset(self):
        return User.objects.all()

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAdminRole()]
        return super().get_permissions()

    def create(self, request, *args, **kwargs):
        payload = s.UserWriteSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        user = create_user(created_by=request.user, **payload.validated_data)
        return Response(self.get_serializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        payload = s.UserWriteSerializer(data=request.data, partial=True)
        payload.is_valid(raise_exception=True)
        user = update_user(actor=request.user, user_id=self.get_object().pk, **payload.validated_data)
        return Response(self.get_serializer(user).data)

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        user = deactivate_user(actor=request.user, user_id=self.get_object().pk)
        return Response({'message': 'User deactivated', 'user': self.get_serializer(user).data})
