import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='VaccineType',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.CharField(max_length=1, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=50)),
            ],
            options={
                'db_table': 'vaccine_types',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='MovementType',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.CharField(max_length=10, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=50)),
                ('type', models.CharField(choices=[('+', 'Charge'), ('-', 'Discharge')], max_length=2)),
                ('category', models.CharField(blank=True, max_length=2, null=True)),
            ],
            options={
                'db_table': 'medical_stock_movement_types',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Lot',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('preparation_date', models.DateField()),
                ('due_date', models.DateField()),
                ('cost', models.DecimalField(
                    blank=True,
                    decimal_places=2,
                    max_digits=10,
                    null=True,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
            ],
            options={
                'db_table': 'lots',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='ExamType',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.CharField(max_length=2, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=50)),
            ],
            options={
                'db_table': 'exam_types',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Exam',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.CharField(max_length=10, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=100)),
                ('procedure', models.IntegerField(
                    choices=[(1, 'List of possible results'), (2, 'Multiple results'), (3, 'Free text')],
                    default=1,
                )),
                ('default_result', models.CharField(blank=True, max_length=50, null=True)),
                ('exam_type', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='exams',
                    to='refdata.examtype',
                )),
            ],
            options={
                'db_table': 'exams',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Laboratory',
            fields=[
                ('lock', models.IntegerField(default=0)),
                ('code', models.AutoField(primary_key=True, serialize=False)),
                ('material', models.CharField(blank=True, default='', max_length=25)),
                ('registration_date', models.DateTimeField(blank=True, null=True)),
                ('exam_date', models.DateField(blank=True, null=True)),
                ('result', models.CharField(blank=True, default='', max_length=50)),
                ('note', models.TextField(blank=True, default='')),
                ('patient_code', models.IntegerField(blank=True, null=True)),
                ('pat_name', models.CharField(blank=True, default='', max_length=100)),
                ('in_out_patient', models.CharField(
                    blank=True,
                    choices=[('I', 'Inpatient'), ('O', 'Outpatient')],
                    default='',
                    max_length=1,
                )),
                ('age', models.IntegerField(blank=True, null=True)),
                ('sex', models.CharField(
                    blank=True,
                    choices=[('M', 'Male'), ('F', 'Female')],
                    default='',
                    max_length=1,
                )),
                ('exam', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='laboratories',
                    to='refdata.exam',
                )),
            ],
            options={
                'db_table': 'laboratories',
                'verbose_name_plural': 'laboratories',
                'ordering': ['code'],
            },
        ),
    ]
