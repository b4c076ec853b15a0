"""
Controllers — HTTP 请求 → Manager 调用 → HTTP 响应。

每个操作只调一次 manager（update 多一次 code 存在性检查），
把 manager 的结果 / 异常翻译成状态码或 API 异常：

  list     空 → 204（无 body），否则 200 + list
  retrieve 不存在 → NotFoundError
  create   DuplicateCodeError → ConflictError；其他 ServiceError / 返回 None → "not created"
  update   code 不存在 → NotFoundError；ServiceError → "not updated"
  destroy  按 code 直接查（不遍历全量 list）；不存在 → NotFoundError；ServiceError → "not deleted"
  check    直接返回 manager.is_code_present()

Controller 不做任何恢复，只 raise，exception_handler 统一序列化。
Controller 本身无状态，每个 resource 一个实例，由 urls.py 挂到 views 上。
"""

import logging

from rest_framework import status
from rest_framework.response import Response

from .exceptions import (
    ConflictError,
    DuplicateCodeError,
    NotFoundError,
    OperationFailedError,
    ServiceError,
    ValidationError,
)
from .managers import get_manager
from .mappers import (
    ExamMapper,
    ExamTypeMapper,
    LaboratoryMapper,
    LotMapper,
    MovementTypeMapper,
    VaccineTypeMapper,
)
from .serializers import (
    ExamSerializer,
    ExamTypeSerializer,
    LaboratorySerializer,
    LotSerializer,
    MovementTypeSerializer,
    VaccineTypeSerializer,
)

logger = logging.getLogger(__name__)


class ReferenceDataController:
    """
    单个参考数据实体的 CRUD 面。

    子类声明：
      resource         URL 段 + manager 注册键（"vaccinetypes"）
      label            面向用户的名字（"Vaccine Type"）
      error_prefix     错误码前缀（"VACCINE_TYPE" → VACCINE_TYPE_NOT_FOUND）
      serializer_class 入站校验 / 出站渲染
      mapper           model ↔ DTO
      code_converter   URL 里 code 的 path converter（"str" / "int"）
    """

    resource = ''
    label = ''
    error_prefix = ''
    serializer_class = None
    mapper = None
    code_converter = 'str'

    @property
    def manager(self):
        return get_manager(self.resource)

    # ── helpers ───────────────────────────────────────────────────────────

    def error_code(self, suffix):
        return f'{self.error_prefix}_{suffix}'

    def not_found(self, code):
        return NotFoundError(
            message=f'{self.label} not found.',
            code=self.error_code('NOT_FOUND'),
            detail={'code': code},
        )

    def read_body(self, data):
        """请求体 → DTO。缺必填字段时 DRF ValidationError 直接冒泡。"""
        serializer = self.serializer_class(data=data)
        serializer.is_valid(raise_exception=True)
        return serializer.save()

    def render(self, record):
        return self.serializer_class(self.mapper.to_dto(record)).data

    # ── operations ────────────────────────────────────────────────────────

    def list_records(self):
        logger.info("Retrieving all the %s records ...", self.label)
        dtos = self.mapper.to_dto_list(self.manager.list_all())
        if not dtos:
            logger.info("No %s found", self.label)
            return Response(status=status.HTTP_204_NO_CONTENT)
        logger.info("Found %d %s records", len(dtos), self.label)
        return Response(self.serializer_class(dtos, many=True).data)

    def retrieve(self, code):
        logger.info("Get %s code: %s", self.label, code)
        record = self.manager.find_by_code(code)
        if record is None:
            raise self.not_found(code)
        return Response(self.render(record))

    def create(self, data):
        dto = self.read_body(data)
        logger.info("Create %s: %s", self.label, dto)
        try:
            created = self.manager.create(self.mapper.to_model(dto))
        except DuplicateCodeError as exc:
            raise ConflictError(
                message=f'{self.label} already present.',
                code=self.error_code('ALREADY_PRESENT'),
                detail=exc.detail,
            ) from exc
        except ServiceError as exc:
            raise OperationFailedError(
                message=f'{self.label} not created.',
                code=self.error_code('NOT_CREATED'),
                detail=exc.detail,
            ) from exc
        if created is None:
            raise OperationFailedError(
                message=f'{self.label} not created.',
                code=self.error_code('NOT_CREATED'),
            )
        return Response(self.render(created), status=status.HTTP_201_CREATED)

    def update(self, data):
        dto = self.read_body(data)
        logger.info("Update %s: %s", self.label, dto)
        if dto.code is None:
            raise ValidationError(
                message='Request validation failed',
                detail={'code': ['The code is required']},
            )
        if not self.manager.is_code_present(dto.code):
            raise self.not_found(dto.code)
        try:
            updated = self.manager.update(self.mapper.to_model(dto))
        except ServiceError as exc:
            raise OperationFailedError(
                message=f'{self.label} not updated.',
                code=self.error_code('NOT_UPDATED'),
                detail=exc.detail,
            ) from exc
        return Response(self.render(updated))

    def destroy(self, code):
        logger.info("Delete %s code: %s", self.label, code)
        record = self.manager.find_by_code(code)
        if record is None:
            raise self.not_found(code)
        try:
            self.manager.delete(record)
        except ServiceError as exc:
            raise OperationFailedError(
                message=f'{self.label} not deleted.',
                code=self.error_code('NOT_DELETED'),
                detail=exc.detail,
            ) from exc
        return Response(True)

    def check(self, code):
        logger.info("Check %s code: %s", self.label, code)
        return Response(self.manager.is_code_present(code))


class VaccineTypeController(ReferenceDataController):
    resource = 'vaccinetypes'
    label = 'Vaccine Type'
    error_prefix = 'VACCINE_TYPE'
    serializer_class = VaccineTypeSerializer
    mapper = VaccineTypeMapper()


class MovementTypeController(ReferenceDataController):
    resource = 'medstockmovementtypes'
    label = 'Movement type'
    error_prefix = 'MOVEMENT_TYPE'
    serializer_class = MovementTypeSerializer
    mapper = MovementTypeMapper()


class LotController(ReferenceDataController):
    resource = 'lots'
    label = 'Lot'
    error_prefix = 'LOT'
    serializer_class = LotSerializer
    mapper = LotMapper()


class ExamTypeController(ReferenceDataController):
    resource = 'examtypes'
    label = 'Exam type'
    error_prefix = 'EXAM_TYPE'
    serializer_class = ExamTypeSerializer
    mapper = ExamTypeMapper()


class ExamController(ReferenceDataController):
    resource = 'exams'
    label = 'Exam'
    error_prefix = 'EXAM'
    serializer_class = ExamSerializer
    mapper = ExamMapper()


class LaboratoryController(ReferenceDataController):
    resource = 'laboratories'
    label = 'Laboratory'
    error_prefix = 'LABORATORY'
    serializer_class = LaboratorySerializer
    mapper = LaboratoryMapper()
    code_converter = 'int'


CONTROLLERS = [
    VaccineTypeController(),
    MovementTypeController(),
    LotController(),
    ExamTypeController(),
    ExamController(),
    LaboratoryController(),
]
