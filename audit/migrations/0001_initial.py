import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('branches', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('resident_create', 'Resident Created'), ('resident_move_in', 'Resident Moved In'), ('resident_notice', 'Notice Given'), ('resident_notice_cancel', 'Notice Withdrawn'), ('resident_move_out', 'Resident Moved Out'), ('room_switch', 'Room Switch'), ('payment_create', 'Payment Recorded'), ('payment_void', 'Payment Voided'), ('payment_correct', 'Payment Corrected'), ('login', 'Login'), ('logout', 'Logout')], db_index=True, help_text='Type of action performed', max_length=30)),
                ('resource_type', models.CharField(choices=[('Resident', 'Resident'), ('Payment', 'Payment'), ('Room', 'Room'), ('User', 'User')], db_index=True, help_text='Type of resource affected', max_length=50)),
                ('resource_id', models.IntegerField(blank=True, db_index=True, help_text='ID of the resource affected', null=True)),
                ('description', models.TextField(help_text='Human-readable description of the action')),
                ('ip_address', models.GenericIPAddressField(blank=True, help_text='IP address of the user', null=True)),
                ('metadata', models.JSONField(blank=True, default=dict, help_text='Additional context data')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, help_text='When the action occurred')),
                ('branch', models.ForeignKey(blank=True, help_text='Branch this action belongs to', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='audit_logs', to='branches.branch')),
                ('user', models.ForeignKey(blank=True, help_text='User who performed the action (empty for scheduled jobs and self-registration)', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['branch', '-timestamp'], name='audit_audit_branch__6f20c8_idx'),
                    models.Index(fields=['user', '-timestamp'], name='audit_audit_user_id_d18a35_idx'),
                    models.Index(fields=['resource_type', 'resource_id'], name='audit_audit_resourc_4b9e72_idx'),
                    models.Index(fields=['action', '-timestamp'], name='audit_audit_action_0c57af_idx'),
                ],
            },
        ),
    ]
