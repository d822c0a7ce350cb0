import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('branches', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Room',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('room_number', models.CharField(help_text="e.g., '101', 'A-2'", max_length=20)),
                ('floor', models.CharField(blank=True, help_text="e.g., 'Ground', '1st'", max_length=20)),
                ('sharing_type', models.IntegerField(choices=[(1, '1-sharing'), (2, '2-sharing'), (3, '3-sharing'), (4, '4-sharing')], help_text='Number of beds: 1, 2, 3 or 4')),
                ('bed_count', models.IntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('cost_per_bed', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('branch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='rooms', to='branches.branch')),
            ],
            options={
                'verbose_name': 'Room',
                'verbose_name_plural': 'Rooms',
                'ordering': ['room_number'],
                'indexes': [
                    models.Index(fields=['branch', 'sharing_type'], name='rooms_room_branch__8a41f2_idx'),
                    models.Index(fields=['branch', 'is_active'], name='rooms_room_branch__3d9c70_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('branch', 'room_number'), name='unique_room_number_per_branch'),
                    models.CheckConstraint(condition=models.Q(('bed_count__gte', 1)), name='room_bed_count_positive'),
                ],
            },
        ),
    ]
