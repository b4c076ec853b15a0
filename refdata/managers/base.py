"""
BaseManager — 所有持久层实现的抽象基类。

Controller 只认识这个接口，完全不知道背后是数据库还是内存。

每个新实现只需：
1. 继承 BaseManager
2. 实现下面 6 个方法
3. 在 factory.py 的 _BACKENDS 注册一行

失败统一抛 exceptions.ServiceError（或其子类 DuplicateCodeError / StaleLockError），
不要把数据库原生异常漏给 controller。
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from django.db import models

_AUTO_FIELD_TYPES = ("AutoField", "BigAutoField", "SmallAutoField")


class BaseManager(ABC):

    def __init__(self, model: type[models.Model]):
        self.model = model

    @property
    def label(self) -> str:
        return str(self.model._meta.verbose_name)

    @property
    def auto_code(self) -> bool:
        """code 是否由存储层分配（自增主键）。"""
        return self.model._meta.pk.get_internal_type() in _AUTO_FIELD_TYPES

    @abstractmethod
    def list_all(self) -> list[models.Model]:
        """返回全部记录，按 code 排序。"""

    @abstractmethod
    def find_by_code(self, code: Any) -> Optional[models.Model]:
        """按 code 查找，不存在返回 None（不抛异常）。"""

    @abstractmethod
    def is_code_present(self, code: Any) -> bool:
        """code 是否已被使用。"""

    @abstractmethod
    def create(self, instance: models.Model) -> models.Model:
        """
        新建记录，返回持久化后的记录（含服务端分配的 code / lock）。

        Raises:
            DuplicateCodeError: code 已存在
            ServiceError:       字段校验失败或其他持久层错误
        """

    @abstractmethod
    def update(self, instance: models.Model) -> models.Model:
        """
        更新记录。instance.lock 必须等于当前版本号，成功后版本号 +1。

        Raises:
            StaleLockError: lock 过期
            ServiceError:   记录不存在、字段校验失败或其他持久层错误
        """

    @abstractmethod
    def delete(self, instance: models.Model) -> None:
        """
        删除记录。

        Raises:
            ServiceError: 记录仍被引用或其他持久层错误
        """
