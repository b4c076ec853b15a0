from django.core.validators import MinValueValidator
from django.db import models


class ReferenceRecord(models.Model):
    """
    所有参考数据表的公共部分。

    lock: 乐观锁版本号。只由 manager 在 update 成功时 +1，
    客户端提交的 lock 必须等于库中当前值，否则 update 被拒绝。
    """

    lock = models.IntegerField(default=0)

    class Meta:
        abstract = True


class VaccineType(ReferenceRecord):
    code = models.CharField(primary_key=True, max_length=1)
    description = models.CharField(max_length=50)

    class Meta:
        db_table = 'vaccine_types'
        ordering = ['code']


class MovementType(ReferenceRecord):
    TYPE_CHOICES = [
        ('+', 'Charge'),
        ('-', 'Discharge'),
    ]

    code = models.CharField(primary_key=True, max_length=10)
    description = models.CharField(max_length=50)
    type = models.CharField(max_length=2, choices=TYPE_CHOICES)
    category = models.CharField(max_length=2, blank=True, null=True)

    class Meta:
        db_table = 'medical_stock_movement_types'
        ordering = ['code']


class Lot(ReferenceRecord):
    code = models.CharField(primary_key=True, max_length=50)
    preparation_date = models.DateField()
    due_date = models.DateField()
    cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        blank=True,
        null=True,
        validators=[MinValueValidator(0)],
    )

    class Meta:
        db_table = 'lots'
        ordering = ['code']


class ExamType(ReferenceRecord):
    code = models.CharField(primary_key=True, max_length=2)
    description = models.CharField(max_length=50)

    class Meta:
        db_table = 'exam_types'
        ordering = ['code']


class Exam(ReferenceRecord):
    PROCEDURE_CHOICES = [
        (1, 'List of possible results'),
        (2, 'Multiple results'),
        (3, 'Free text'),
    ]

    code = models.CharField(primary_key=True, max_length=10)
    description = models.CharField(max_length=100)
    exam_type = models.ForeignKey(ExamType, on_delete=models.PROTECT, related_name='exams')
    procedure = models.IntegerField(choices=PROCEDURE_CHOICES, default=1)
    default_result = models.CharField(max_length=50, blank=True, null=True)

    class Meta:
        db_table = 'exams'
        ordering = ['code']


class Laboratory(ReferenceRecord):
    IN_OUT_CHOICES = [
        ('I', 'Inpatient'),
        ('O', 'Outpatient'),
    ]
    SEX_CHOICES = [
        ('M', 'Male'),
        ('F', 'Female'),
    ]

    # lab result 的 code 由数据库分配
    code = models.AutoField(primary_key=True)
    material = models.CharField(max_length=25, blank=True, default='')
    exam = models.ForeignKey(Exam, on_delete=models.PROTECT, related_name='laboratories')
    registration_date = models.DateTimeField(blank=True, null=True)
    exam_date = models.DateField(blank=True, null=True)
    result = models.CharField(max_length=50, blank=True, default='')
    note = models.TextField(blank=True, default='')
    patient_code = models.IntegerField(blank=True, null=True)
    pat_name = models.CharField(max_length=100, blank=True, default='')
    in_out_patient = models.CharField(max_length=1, choices=IN_OUT_CHOICES, blank=True, default='')
    age = models.IntegerField(blank=True, null=True)
    sex = models.CharField(max_length=1, choices=SEX_CHOICES, blank=True, default='')

    class Meta:
        db_table = 'laboratories'
        verbose_name_plural = 'laboratories'
        ordering = ['code']
