import django.db.models.deletion
import django.utils.timezone
import simple_history.models
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Policy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('plate', models.CharField(help_text='Vehicle registration plate', max_length=32, unique=True)),
                ('owner', models.CharField(help_text='Policy holder name', max_length=255)),
                ('contact', models.CharField(help_text='Policy holder phone number (E.164)', max_length=32)),
                ('company', models.CharField(db_index=True, help_text='Insurer name', max_length=100)),
                ('start_date', models.DateField(help_text='Cover start date')),
                ('expiry_date', models.DateField(db_index=True, help_text='Cover end date')),
                ('renewed_date', models.DateField(blank=True, help_text='Date of the most recent renewal', null=True)),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_created_set', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='%(class)s_updated_set', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Policy',
                'verbose_name_plural': 'Policies',
                'ordering': ['expiry_date', 'id'],
                'indexes': [
                    models.Index(fields=['company', 'expiry_date'], name='core_policy_company_exp_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(expiry_date__gte=models.F('start_date')), name='policy_expiry_not_before_start'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricalPolicy',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('created_at', models.DateTimeField(blank=True, db_index=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('plate', models.CharField(db_index=True, help_text='Vehicle registration plate', max_length=32)),
                ('owner', models.CharField(help_text='Policy holder name', max_length=255)),
                ('contact', models.CharField(help_text='Policy holder phone number (E.164)', max_length=32)),
                ('company', models.CharField(db_index=True, help_text='Insurer name', max_length=100)),
                ('start_date', models.DateField(help_text='Cover start date')),
                ('expiry_date', models.DateField(db_index=True, help_text='Cover end date')),
                ('renewed_date', models.DateField(blank=True, help_text='Date of the most recent renewal', null=True)),
                ('history_id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, db_constraint=False, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Policy',
                'verbose_name_plural': 'historical Policies',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='FollowUp',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('followup_status', models.CharField(choices=[('confirmed', 'Confirmed'), ('pending', 'Pending'), ('missed', 'Missed')], db_index=True, max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('followed_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('followed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='followups', to=settings.AUTH_USER_MODEL)),
                ('policy', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='followup', to='core.policy')),
            ],
            options={
                'verbose_name': 'Follow-up',
                'verbose_name_plural': 'Follow-ups',
                'ordering': ['-followed_at'],
            },
        ),
        migrations.CreateModel(
            name='PolicyHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('expiry_date', models.DateField(db_index=True, help_text='Expiry date of the closed term')),
                ('renewed_date', models.DateField(blank=True, db_index=True, help_text='When the term was renewed; empty while still lapsed', null=True)),
                ('policy', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='terms', to='core.policy')),
            ],
            options={
                'verbose_name': 'Policy history',
                'verbose_name_plural': 'Policy history',
                'ordering': ['-expiry_date', '-id'],
                'constraints': [
                    models.UniqueConstraint(fields=('policy', 'expiry_date'), name='unique_policy_term_expiry'),
                ],
            },
        ),
    ]
