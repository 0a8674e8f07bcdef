"""
Request and response schemas for the InsureApp API.

Input serializers validate bodies and query strings before anything reaches
the service layer; output serializers shape model instances for the
dashboard.
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from apps.core.models import Advertisement, Policy, FollowUp, PolicyHistory
from apps.core.services import expiry_service, lifecycle_service, summary_service
from apps.notifications.models import SmsLog

User = get_user_model()


# Policies
class PolicySerializer(serializers.ModelSerializer):
    """Policy with its derived bucket, lifecycle state and follow-up status."""

    followup_status = serializers.CharField(read_only=True)
    bucket = serializers.SerializerMethodField()
    state = serializers.SerializerMethodField()
    days_until_expiry = serializers.SerializerMethodField()

    class Meta:
        model = Policy
        fields = [
            'id', 'plate', 'owner', 'contact', 'company', 'start_date',
            'expiry_date', 'renewed_date', 'followup_status', 'bucket',
            'state', 'days_until_expiry', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_bucket(self, obj):
        return obj.bucket(self.context.get('now'))

    def get_state(self, obj):
        return lifecycle_service.lifecycle_state(obj, self.context.get('now'))

    def get_days_until_expiry(self, obj):
        return obj.days_until_expiry(self.context.get('now'))


class PolicyWriteSerializer(serializers.Serializer):
    plate = serializers.CharField(max_length=32)
    owner = serializers.CharField(max_length=255)
    contact = serializers.CharField(max_length=32)
    company = serializers.CharField(max_length=100)
    start_date = serializers.DateField()
    expiry_date = serializers.DateField()

    def validate(self, attrs):
        start = attrs.get('start_date')
        expiry = attrs.get('expiry_date')
        if start and expiry and expiry < start:
            raise serializers.ValidationError({'expiry_date': 'Expiry date cannot be before start date.'})
        return attrs


class PolicyUpdateSerializer(serializers.Serializer):
    """Non-date fields only; dates change through the renew action."""

    plate = serializers.CharField(max_length=32, required=False)
    owner = serializers.CharField(max_length=255, required=False)
    contact = serializers.CharField(max_length=32, required=False)
    company = serializers.CharField(max_length=100, required=False)
    start_date = serializers.DateField(required=False)
    expiry_date = serializers.DateField(required=False)


class RenewSerializer(serializers.Serializer):
    expiry_date = serializers.DateField()
    start_date = serializers.DateField(required=False, allow_null=True)
    contact = serializers.CharField(max_length=32, required=False, allow_blank=True)


class PolicyImportSerializer(serializers.Serializer):
    policies = serializers.ListField(
        child=serializers.DictField(),
        allow_empty=False,
        error_messages={'empty': 'You must upload at least one policy.'},
    )


class BroadcastRecipientSerializer(serializers.Serializer):
    contact = serializers.CharField()
    owner = serializers.CharField(required=False, allow_blank=True)
    plate = serializers.CharField(required=False, allow_blank=True)
    days = serializers.IntegerField(required=False, allow_null=True)


class BroadcastSerializer(serializers.Serializer):
    template = serializers.CharField()
    recipients = BroadcastRecipientSerializer(many=True, allow_empty=False)


# Dashboard
class SummarySerializer(serializers.Serializer):
    created = serializers.IntegerField()
    active = serializers.IntegerField()
    expiring = serializers.IntegerField()
    expired = serializers.IntegerField()


class TrendsQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=summary_service.PERIODS, default=summary_service.PERIOD_MONTH)


class CompanyQuerySerializer(serializers.Serializer):
    company = serializers.CharField(required=False, allow_blank=True)


class ExportQuerySerializer(CompanyQuerySerializer):
    bucket = serializers.ChoiceField(
        choices=(expiry_service.TODAY, expiry_service.WEEK, expiry_service.MONTH, expiry_service.EXPIRED),
        default=expiry_service.TODAY,
    )


class DateRangeQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get('start') and attrs.get('end') and attrs['end'] < attrs['start']:
            raise serializers.ValidationError({'end': 'End date cannot be before start date.'})
        return attrs


# Follow-ups
class FollowUpInputSerializer(serializers.Serializer):
    policy_id = serializers.IntegerField()
    followup_status = serializers.ChoiceField(choices=[c for c, _ in FollowUp.STATUS_CHOICES])
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class FollowUpSerializer(serializers.ModelSerializer):
    policy_id = serializers.IntegerField(source='policy.id', read_only=True)
    plate = serializers.CharField(source='policy.plate', read_only=True)
    owner = serializers.CharField(source='policy.owner', read_only=True)
    contact = serializers.CharField(source='policy.contact', read_only=True)
    company = serializers.CharField(source='policy.company', read_only=True)
    expiry_date = serializers.DateField(source='policy.expiry_date', read_only=True)
    followed_by = serializers.SerializerMethodField()

    class Meta:
        model = FollowUp
        fields = [
            'id', 'policy_id', 'plate', 'owner', 'contact', 'company',
            'expiry_date', 'followup_status', 'notes', 'followed_at', 'followed_by'
        ]
        read_only_fields = fields

    def get_followed_by(self, obj):
        if not obj.followed_by_id:
            return None
        return obj.followed_by.get_full_name() or obj.followed_by.email


# History
class PolicyHistorySerializer(serializers.ModelSerializer):
    policy_id = serializers.IntegerField(source='policy.id', read_only=True)
    plate = serializers.CharField(source='policy.plate', read_only=True)
    owner = serializers.CharField(source='policy.owner', read_only=True)
    contact = serializers.CharField(source='policy.contact', read_only=True)
    company = serializers.CharField(source='policy.company', read_only=True)
    status = serializers.SerializerMethodField()

    class Meta:
        model = PolicyHistory
        fields = [
            'id', 'policy_id', 'plate', 'owner', 'contact', 'company',
            'expiry_date', 'renewed_date', 'status', 'created_at'
        ]
        read_only_fields = fields

    def get_status(self, obj):
        return 'Renewed' if obj.is_renewed else 'Expired'


# SMS
class SmsLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = SmsLog
        fields = [
            'id', 'phone_number', 'message', 'message_id', 'cost',
            'delivery_status', 'is_read', 'created_at'
        ]
        read_only_fields = fields


# Advertisements
class AdvertisementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Advertisement
        fields = [
            'id', 'company_name', 'ad_type', 'media_url', 'title',
            'cta_text', 'target_url', 'is_active', 'created_at'
        ]
        read_only_fields = fields


class AdvertisementWriteSerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=255)
    media_url = serializers.CharField(max_length=500)
    ad_type = serializers.ChoiceField(choices=Advertisement.TYPE_CHOICES, default=Advertisement.TYPE_IMAGE)
    title = serializers.CharField(required=False, allow_blank=True, max_length=255, default='')
    cta_text = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    target_url = serializers.CharField(required=False, allow_blank=True, max_length=500, default='')


class AdvertisementStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


# Accounts
class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class EmailSerializer(serializers.Serializer):
    email = serializers.EmailField()


class VerifyOtpSerializer(EmailSerializer):
    otp = serializers.RegexField(r'^\d{6}$', error_messages={'invalid': 'OTP must be six digits.'})


class ResetPasswordSerializer(VerifyOtpSerializer):
    password = serializers.CharField(trim_whitespace=False)

    def validate_password(self, value):
        validate_password(value)
        return value


class UserSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()
    status = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'first_name', 'last_name', 'email', 'phone_number',
            'role', 'status', 'is_active', 'date_joined', 'last_login_at'
        ]
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_full_name() or obj.email


class UserWriteSerializer(serializers.Serializer):
    email = serializers.EmailField(required=False)
    password = serializers.CharField(required=False, trim_whitespace=False, write_only=True)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    phone_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate_password(self, value):
        validate_password(value)
        return value

    def validate(self, attrs):
        creating = self.instance is None and not self.partial
        if creating:
            missing = {name: 'This field is required.' for name in ('email', 'password') if not attrs.get(name)}
            if missing:
                raise serializers.ValidationError(missing)
        return attrs
