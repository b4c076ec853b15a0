"""
OrmManager — Django ORM 实现。

乐观锁：update 是一条 UPDATE ... WHERE code=? AND lock=?，
影响 0 行就说明 lock 过期（或记录已被删），不会覆盖别人的修改。

所有写操作包在 transaction.atomic() 里：出错时只回滚到 savepoint，
外层事务（比如测试用例的事务）还能继续用。
"""

import logging
from typing import Any, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, models, transaction
from django.db.models import F, ProtectedError

from ..exceptions import DuplicateCodeError, ServiceError, StaleLockError
from .base import BaseManager

logger = logging.getLogger(__name__)


class OrmManager(BaseManager):

    def _queryset(self):
        # select_related() 不带参数 = 沿所有非空外键一次 join 出来
        return self.model.objects.select_related()

    def _validate(self, instance: models.Model) -> None:
        try:
            instance.full_clean(validate_unique=False)
        except DjangoValidationError as exc:
            raise ServiceError(
                message=f"Invalid {self.label}.",
                code='INVALID_RECORD',
                detail=exc.message_dict,
            ) from exc

    def list_all(self) -> list[models.Model]:
        try:
            return list(self._queryset())
        except DatabaseError as exc:
            logger.exception("Listing %s failed", self.label)
            raise ServiceError(f"Unable to list {self.model._meta.verbose_name_plural}.") from exc

    def find_by_code(self, code: Any) -> Optional[models.Model]:
        try:
            return self._queryset().filter(pk=code).first()
        except DatabaseError as exc:
            logger.exception("Lookup of %s %r failed", self.label, code)
            raise ServiceError(f"Unable to load {self.label} {code!r}.") from exc

    def is_code_present(self, code: Any) -> bool:
        try:
            return self.model.objects.filter(pk=code).exists()
        except DatabaseError as exc:
            logger.exception("Existence check of %s %r failed", self.label, code)
            raise ServiceError(f"Unable to check {self.label} {code!r}.") from exc

    def create(self, instance: models.Model) -> models.Model:
        if self.auto_code:
            instance.pk = None
        code = instance.pk
        if code is not None and self.is_code_present(code):
            raise DuplicateCodeError(
                message=f"The code {code!r} is already used by another {self.label}.",
                detail={'code': code},
            )

        instance.lock = 0
        self._validate(instance)

        try:
            with transaction.atomic():
                instance.save(force_insert=True)
        except IntegrityError as exc:
            # 并发插入同一 code 时，预检查会漏掉，由唯一约束兜底
            if code is not None and self.is_code_present(code):
                raise DuplicateCodeError(
                    message=f"The code {code!r} is already used by another {self.label}.",
                    detail={'code': code},
                ) from exc
            logger.exception("Insert of %s %r violated a constraint", self.label, code)
            raise ServiceError(f"Unable to create {self.label}.") from exc
        except DatabaseError as exc:
            logger.exception("Insert of %s %r failed", self.label, code)
            raise ServiceError(f"Unable to create {self.label}.") from exc

        logger.debug("Created %s %r", self.label, instance.pk)
        return self.find_by_code(instance.pk)

    def update(self, instance: models.Model) -> models.Model:
        code = instance.pk
        self._validate(instance)

        values = {
            field.attname: getattr(instance, field.attname)
            for field in self.model._meta.concrete_fields
            if not field.primary_key and field.name != 'lock'
        }
        try:
            with transaction.atomic():
                updated = (
                    self.model.objects
                    .filter(pk=code, lock=instance.lock)
                    .update(lock=F('lock') + 1, **values)
                )
        except DatabaseError as exc:
            logger.exception("Update of %s %r failed", self.label, code)
            raise ServiceError(f"Unable to update {self.label} {code!r}.") from exc

        if not updated:
            if not self.is_code_present(code):
                raise ServiceError(
                    message=f"{self.label.capitalize()} {code!r} does not exist.",
                    code='RECORD_NOT_FOUND',
                )
            raise StaleLockError(
                message=f"{self.label.capitalize()} {code!r} was modified by another user.",
                detail={'code': code, 'lock': instance.lock},
            )

        logger.debug("Updated %s %r", self.label, code)
        return self.find_by_code(code)

    def delete(self, instance: models.Model) -> None:
        code = instance.pk
        try:
            with transaction.atomic():
                deleted, _ = instance.delete()
        except ProtectedError as exc:
            raise ServiceError(
                message=f"{self.label.capitalize()} {code!r} is still referenced.",
                code='RECORD_IN_USE',
                detail={'code': code},
            ) from exc
        except DatabaseError as exc:
            logger.exception("Delete of %s %r failed", self.label, code)
            raise ServiceError(f"Unable to delete {self.label} {code!r}.") from exc

        if not deleted:
            raise ServiceError(
                message=f"{self.label.capitalize()} {code!r} does not exist.",
                code='RECORD_NOT_FOUND',
            )
        logger.debug("Deleted %s %r", self.label, code)
