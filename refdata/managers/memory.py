"""
InMemoryManager — 进程内 dict 实现，和 OrmManager 语义一致。

用途：本地演示 / 单元测试（REFDATA_MANAGER_BACKEND=memory）。
存进去和取出来的都是 deepcopy，调用方改了拿到的对象不会影响存储。

外键只按 code 存；读的时候从被引用方的 manager 取当前记录填回去，
效果和 ORM 的 select_related 一样。被引用的记录不能删（对应 on_delete=PROTECT）。
"""

import copy
import logging
import threading
from typing import Any, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models

from ..exceptions import DuplicateCodeError, ServiceError, StaleLockError
from .base import BaseManager

logger = logging.getLogger(__name__)


class MemoryRegistry:
    """一组互相引用的 InMemoryManager：按 model 查找彼此，共用一把锁。"""

    def __init__(self):
        self.lock = threading.RLock()
        self.managers: dict[type[models.Model], "InMemoryManager"] = {}


class InMemoryManager(BaseManager):

    def __init__(self, model: type[models.Model], registry: Optional[MemoryRegistry] = None):
        super().__init__(model)
        self._registry = registry if registry is not None else MemoryRegistry()
        self._registry.managers[model] = self
        self._records: dict[Any, models.Model] = {}
        self._mutex = self._registry.lock
        self._next_code = 1

    # ── relations (caller holds the lock) ─────────────────────────────────

    def _relations(self):
        return [f for f in self.model._meta.concrete_fields if f.is_relation]

    def _lookup(self, model, code) -> Optional[models.Model]:
        peer = self._registry.managers.get(model)
        if peer is None:
            return None
        record = peer._records.get(code)
        return peer._hydrate(record) if record is not None else None

    def _hydrate(self, record: models.Model) -> models.Model:
        result = copy.deepcopy(record)
        for field in self._relations():
            code = getattr(result, field.attname)
            if code is None:
                continue
            target = self._lookup(field.related_model, code)
            if target is not None:
                setattr(result, field.name, target)
        return result

    def _referrers(self, code) -> list[str]:
        used_by = []
        for peer in self._registry.managers.values():
            for field in peer._relations():
                if field.related_model is not self.model:
                    continue
                used_by.extend(
                    f"{peer.label} {pk!r}"
                    for pk, record in peer._records.items()
                    if getattr(record, field.attname) == code
                )
        return used_by

    def _validate(self, instance: models.Model) -> None:
        relations = self._relations()
        errors = {}
        try:
            instance.clean_fields(exclude=[f.name for f in relations])
        except DjangoValidationError as exc:
            errors.update(exc.message_dict)
        for field in relations:
            code = getattr(instance, field.attname)
            if code is None:
                if not field.null:
                    errors[field.name] = ['This field cannot be null.']
                continue
            target = self._lookup(field.related_model, code)
            if target is None:
                errors[field.name] = [
                    f"{field.related_model._meta.verbose_name} instance with code {code!r} does not exist."
                ]
            else:
                # 存被引用方的当前记录，不存客户端带来的副本
                setattr(instance, field.name, target)
        if errors:
            raise ServiceError(
                message=f"Invalid {self.label}.",
                code='INVALID_RECORD',
                detail=errors,
            )

    # ── BaseManager ───────────────────────────────────────────────────────

    def list_all(self) -> list[models.Model]:
        with self._mutex:
            return [self._hydrate(self._records[code]) for code in sorted(self._records)]

    def find_by_code(self, code: Any) -> Optional[models.Model]:
        with self._mutex:
            record = self._records.get(code)
            return self._hydrate(record) if record is not None else None

    def is_code_present(self, code: Any) -> bool:
        with self._mutex:
            return code in self._records

    def create(self, instance: models.Model) -> models.Model:
        record = copy.deepcopy(instance)
        record.lock = 0
        if self.auto_code:
            record.pk = None

        with self._mutex:
            if not self.auto_code and record.pk in self._records:
                raise DuplicateCodeError(
                    message=f"The code {record.pk!r} is already used by another {self.label}.",
                    detail={'code': record.pk},
                )
            self._validate(record)
            if self.auto_code:
                record.pk = self._next_code
                self._next_code += 1
            self._records[record.pk] = record
            logger.debug("Created %s %r", self.label, record.pk)
            return self._hydrate(record)

    def update(self, instance: models.Model) -> models.Model:
        record = copy.deepcopy(instance)

        with self._mutex:
            self._validate(record)
            current = self._records.get(record.pk)
            if current is None:
                raise ServiceError(
                    message=f"{self.label.capitalize()} {record.pk!r} does not exist.",
                    code='RECORD_NOT_FOUND',
                )
            if current.lock != record.lock:
                raise StaleLockError(
                    message=f"{self.label.capitalize()} {record.pk!r} was modified by another user.",
                    detail={'code': record.pk, 'lock': record.lock},
                )
            record.lock = current.lock + 1
            self._records[record.pk] = record
            logger.debug("Updated %s %r", self.label, record.pk)
            return self._hydrate(record)

    def delete(self, instance: models.Model) -> None:
        code = instance.pk
        with self._mutex:
            if code not in self._records:
                raise ServiceError(
                    message=f"{self.label.capitalize()} {code!r} does not exist.",
                    code='RECORD_NOT_FOUND',
                )
            used_by = self._referrers(code)
            if used_by:
                logger.debug("%s %r still referenced by %s", self.label, code, used_by)
                raise ServiceError(
                    message=f"{self.label.capitalize()} {code!r} is still referenced.",
                    code='RECORD_IN_USE',
                    detail={'code': code},
                )
            del self._records[code]
        logger.debug("Deleted %s %r", self.label, code)
