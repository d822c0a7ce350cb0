import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('branches', '0001_initial'),
        ('rooms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Resident',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('phone', models.CharField(max_length=15)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('bed_number', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('active', 'Active'), ('notice_period', 'Notice Period'), ('inactive', 'Inactive')], default='pending', max_length=20)),
                ('check_in_date', models.DateField(blank=True, null=True)),
                ('check_out_date', models.DateField(blank=True, null=True)),
                ('vacation_date', models.DateField(blank=True, help_text='Date the resident leaves after notice', null=True)),
                ('notice_days', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('rent_amount', models.DecimalField(blank=True, decimal_places=2, help_text="Monthly rent. Empty means the room's cost per bed", max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(0)])),
                ('advance_amount', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('advance_date', models.DateField(blank=True, null=True)),
                ('advance_receipt_number', models.CharField(blank=True, max_length=50)),
                ('security_deposit', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('payment_status', models.CharField(choices=[('paid', 'Paid'), ('pending', 'Pending'), ('overdue', 'Overdue')], default='pending', max_length=20)),
                ('last_payment_date', models.DateField(blank=True, null=True)),
                ('payment_status_updated_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='residents', to='branches.branch')),
                ('room', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='residents', to='rooms.room')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_residents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Resident',
                'verbose_name_plural': 'Residents',
                'ordering': ['first_name', 'last_name'],
                'indexes': [
                    models.Index(fields=['branch', 'status'], name='residents_r_branch__0f6b2e_idx'),
                    models.Index(fields=['branch', 'phone'], name='residents_r_branch__a27c41_idx'),
                    models.Index(fields=['status', 'vacation_date'], name='residents_r_status_5e88d3_idx'),
                    models.Index(fields=['room', 'status'], name='residents_r_room_id_c4190a_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('status__in', ['active', 'notice_period'])), fields=('room', 'bed_number'), name='unique_allocated_bed'),
                    models.CheckConstraint(condition=models.Q(models.Q(('bed_number__isnull', True), ('room__isnull', True)), models.Q(('bed_number__isnull', False), ('room__isnull', False)), _connector='OR'), name='resident_room_and_bed_together'),
                    models.CheckConstraint(condition=models.Q(models.Q(('status', 'inactive'), _negated=True), models.Q(('check_out_date__isnull', False), ('room__isnull', True)), _connector='OR'), name='inactive_resident_has_no_room'),
                    models.CheckConstraint(condition=models.Q(models.Q(('status__in', ['active', 'notice_period']), _negated=True), ('room__isnull', False), _connector='OR'), name='allocated_resident_has_room'),
                    models.CheckConstraint(condition=models.Q(models.Q(('status', 'notice_period'), _negated=True), ('vacation_date__isnull', False), _connector='OR'), name='notice_resident_has_vacation_date'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RoomSwitch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('from_bed', models.PositiveSmallIntegerField()),
                ('to_bed', models.PositiveSmallIntegerField()),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('switched_at', models.DateTimeField(auto_now_add=True)),
                ('resident', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='switch_history', to='residents.resident')),
                ('from_room', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='switches_out', to='rooms.room')),
                ('to_room', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='switches_in', to='rooms.room')),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='room_switches', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Room Switch',
                'verbose_name_plural': 'Room Switches',
                'ordering': ['-switched_at', '-id'],
                'indexes': [models.Index(fields=['resident', 'switched_at'], name='residents_r_residen_71be93_idx')],
            },
        ),
    ]
