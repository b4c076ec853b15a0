"""
工厂函数：根据 resource 名 + settings.REFDATA_MANAGER_BACKEND 返回 Manager 实例。

新增参考数据实体只需：
  1. 在 models.py 新建 model
  2. 在此处 _build_registry 加一行
  不需要修改 controller 或任何业务代码。

换持久层实现只需改环境变量 REFDATA_MANAGER_BACKEND（orm / memory）。
"""

from django.conf import settings

from .base import BaseManager
from .memory import InMemoryManager, MemoryRegistry
from .orm import OrmManager

_BACKENDS: dict[str, type[BaseManager]] = {
    "orm":    OrmManager,
    "memory": InMemoryManager,
}

# memory 后端的数据存在实例里，所以实例要按进程缓存
_INSTANCES: dict[tuple[str, str], BaseManager] = {}

# memory 后端的 manager 之间要按 model 互查外键
_MEMORY_REGISTRY = MemoryRegistry()


def _build_registry() -> dict:
    # 延迟导入，避免在 app registry ready 之前触发 model import
    from ..models import Exam, ExamType, Laboratory, Lot, MovementType, VaccineType

    return {
        "vaccinetypes":          VaccineType,
        "medstockmovementtypes": MovementType,
        "lots":                  Lot,
        "examtypes":             ExamType,
        "exams":                 Exam,
        "laboratories":          Laboratory,
    }


def get_manager(resource: str) -> BaseManager:
    """
    返回 resource 对应的 Manager。

    Raises:
        ValueError: 未知的 backend 或 resource
    """
    backend = getattr(settings, "REFDATA_MANAGER_BACKEND", "orm")
    manager_cls = _BACKENDS.get(backend)
    if manager_cls is None:
        raise ValueError(
            f"Unknown REFDATA_MANAGER_BACKEND: {backend!r}. "
            f"Known backends: {list(_BACKENDS.keys())}"
        )

    key = (backend, resource)
    if key not in _INSTANCES:
        registry = _build_registry()
        model = registry.get(resource)
        if model is None:
            raise ValueError(
                f"Unknown resource: {resource!r}. "
                f"Known resources: {list(registry.keys())}"
            )
        if manager_cls is InMemoryManager:
            _INSTANCES[key] = InMemoryManager(model, registry=_MEMORY_REGISTRY)
        else:
            _INSTANCES[key] = manager_cls(model)
    return _INSTANCES[key]


def reset_managers() -> None:
    """丢弃缓存的 Manager（memory 后端的数据一起清空）。"""
    _INSTANCES.clear()
    _MEMORY_REGISTRY.managers.clear()
