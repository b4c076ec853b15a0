"""
Mapper — ORM model ↔ transfer object。

纯函数、无副作用：
- to_dto / to_model 逐字段拷贝，lock 原样带过去
- 嵌套引用为 None 时结果也是 None，不抛异常
- list 版本保持原顺序

新增实体只需：声明 model_class / dto_class / fields，
有嵌套引用的在 nested 里登记 {字段名: 对应 Mapper}。
"""

from typing import Iterable

from .dto import ExamDTO, ExamTypeDTO, LaboratoryDTO, LotDTO, MovementTypeDTO, VaccineTypeDTO
from .models import Exam, ExamType, Laboratory, Lot, MovementType, VaccineType


class ModelMapper:

    model_class = None
    dto_class = None
    fields: tuple[str, ...] = ()
    nested: dict[str, "ModelMapper"] = {}

    def to_dto(self, model):
        values = {name: getattr(model, name) for name in self.fields}
        for name, mapper in self.nested.items():
            attname = self.model_class._meta.get_field(name).attname
            if getattr(model, attname) is None:
                values[name] = None
            else:
                values[name] = mapper.to_dto(getattr(model, name))
        return self.dto_class(**values)

    def to_model(self, dto):
        values = {name: getattr(dto, name) for name in self.fields}
        for name, mapper in self.nested.items():
            nested_dto = getattr(dto, name)
            if nested_dto is not None:
                values[name] = mapper.to_model(nested_dto)
        return self.model_class(**values)

    def to_dto_list(self, models: Iterable) -> list:
        return [self.to_dto(model) for model in models]

    def to_model_list(self, dtos: Iterable) -> list:
        return [self.to_model(dto) for dto in dtos]


class VaccineTypeMapper(ModelMapper):
    model_class = VaccineType
    dto_class = VaccineTypeDTO
    fields = ('code', 'description', 'lock')


class MovementTypeMapper(ModelMapper):
    model_class = MovementType
    dto_class = MovementTypeDTO
    fields = ('code', 'description', 'type', 'category', 'lock')


class LotMapper(ModelMapper):
    model_class = Lot
    dto_class = LotDTO
    fields = ('code', 'preparation_date', 'due_date', 'cost', 'lock')


class ExamTypeMapper(ModelMapper):
    model_class = ExamType
    dto_class = ExamTypeDTO
    fields = ('code', 'description', 'lock')


class ExamMapper(ModelMapper):
    model_class = Exam
    dto_class = ExamDTO
    fields = ('code', 'description', 'procedure', 'default_result', 'lock')
    nested = {'exam_type': ExamTypeMapper()}


class LaboratoryMapper(ModelMapper):
    model_class = Laboratory
    dto_class = LaboratoryDTO
    fields = (
        'code', 'material', 'registration_date', 'exam_date', 'result', 'note',
        'patient_code', 'pat_name', 'in_out_patient', 'age', 'sex', 'lock',
    )
    nested = {'exam': ExamMapper()}
