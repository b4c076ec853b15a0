"""
Transfer-object serializers — 边界校验 + 输出格式化。

入站：Serializer(data=request.data).is_valid(raise_exception=True)
      → serializer.save() 返回 dto.py 里的 dataclass（嵌套 DTO 递归构造）。
      缺必填字段时 DRF 抛 ValidationError，exception_handler 转成统一 400 格式，
      请求根本到不了 manager。
出站：Serializer(dto).data / Serializer(dtos, many=True).data。
"""

from decimal import Decimal

from rest_framework import serializers

from .dto import ExamDTO, ExamTypeDTO, LaboratoryDTO, LotDTO, MovementTypeDTO, VaccineTypeDTO
from .models import Exam, Laboratory, MovementType


def _required(label, blank=False):
    message = f'The {label} is required'
    messages = {'required': message, 'null': message}
    if blank:
        # 只有 CharField 会报 blank
        messages['blank'] = message
    return messages


class DTOSerializer(serializers.Serializer):
    """
    save() 返回 dto_class 实例而不是 ORM 对象。

    子类只需声明字段和 dto_class。
    """

    dto_class = None

    lock = serializers.IntegerField(required=False, default=0, min_value=0)

    def create(self, validated_data):
        return self.build_dto(validated_data)

    def build_dto(self, data):
        values = {}
        for name, value in data.items():
            field = self.fields[name]
            if isinstance(field, DTOSerializer) and value is not None:
                value = field.build_dto(value)
            values[name] = value
        return self.dto_class(**values)


class VaccineTypeSerializer(DTOSerializer):
    dto_class = VaccineTypeDTO

    code = serializers.CharField(max_length=1, error_messages=_required('code', blank=True))
    description = serializers.CharField(max_length=50, error_messages=_required('description', blank=True))


class MovementTypeSerializer(DTOSerializer):
    dto_class = MovementTypeDTO

    code = serializers.CharField(max_length=10, error_messages=_required('code', blank=True))
    description = serializers.CharField(max_length=50, error_messages=_required('description', blank=True))
    type = serializers.ChoiceField(choices=MovementType.TYPE_CHOICES, error_messages=_required('type'))
    category = serializers.CharField(max_length=2, required=False, allow_null=True, allow_blank=True)


class LotSerializer(DTOSerializer):
    dto_class = LotDTO

    code = serializers.CharField(max_length=50, error_messages=_required('code', blank=True))
    preparation_date = serializers.DateField(error_messages=_required('preparation date'))
    due_date = serializers.DateField(error_messages=_required('due date'))
    cost = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False,
        allow_null=True,
    )


class ExamTypeSerializer(DTOSerializer):
    dto_class = ExamTypeDTO

    code = serializers.CharField(max_length=2, error_messages=_required('code', blank=True))
    description = serializers.CharField(max_length=50, error_messages=_required('description', blank=True))


class ExamSerializer(DTOSerializer):
    dto_class = ExamDTO

    code = serializers.CharField(max_length=10, error_messages=_required('code', blank=True))
    description = serializers.CharField(max_length=100, error_messages=_required('description', blank=True))
    exam_type = ExamTypeSerializer(error_messages=_required('exam type'))
    procedure = serializers.ChoiceField(choices=Exam.PROCEDURE_CHOICES, required=False, default=1)
    default_result = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)


class LaboratorySerializer(DTOSerializer):
    dto_class = LaboratoryDTO

    # create 时可省略（服务端分配），update 时由 view 检查
    code = serializers.IntegerField(required=False, allow_null=True)
    material = serializers.CharField(max_length=25, required=False, allow_blank=True)
    exam = ExamSerializer(error_messages=_required('exam'))
    registration_date = serializers.DateTimeField(required=False, allow_null=True)
    exam_date = serializers.DateField(required=False, allow_null=True)
    result = serializers.CharField(max_length=50, required=False, allow_blank=True)
    note = serializers.CharField(required=False, allow_blank=True)
    patient_code = serializers.IntegerField(required=False, allow_null=True)
    pat_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    in_out_patient = serializers.ChoiceField(
        choices=Laboratory.IN_OUT_CHOICES, required=False, allow_blank=True,
    )
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    sex = serializers.ChoiceField(choices=Laboratory.SEX_CHOICES, required=False, allow_blank=True)
