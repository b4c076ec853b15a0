"""
Transfer objects — 对外（HTTP）交换的数据形状。

每个请求构造一次，响应完就丢弃；和 ORM model 解耦，
转换由 mappers.py 负责，校验由 serializers.py 负责。

嵌套的 DTO（ExamDTO.exam_type / LaboratoryDTO.exam）是值嵌入，不是所有权，
可以为 None。
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class VaccineTypeDTO:
    code: str
    description: str
    lock: int = 0


@dataclass
class MovementTypeDTO:
    code: str
    description: str
    type: str                       # "+" charge / "-" discharge
    category: Optional[str] = None
    lock: int = 0


@dataclass
class LotDTO:
    code: str
    preparation_date: date
    due_date: date
    cost: Optional[Decimal] = None
    lock: int = 0


@dataclass
class ExamTypeDTO:
    code: str
    description: str
    lock: int = 0


@dataclass
class ExamDTO:
    code: str
    description: str
    exam_type: Optional[ExamTypeDTO] = None
    procedure: int = 1
    default_result: Optional[str] = None
    lock: int = 0


@dataclass
class LaboratoryDTO:
    """
    Lab result。

    code 由服务端分配：create 时忽略客户端传入的值，update 时必填。
    """

    code: Optional[int] = None
    material: str = ""
    exam: Optional[ExamDTO] = None
    registration_date: Optional[datetime] = None
    exam_date: Optional[date] = None
    result: str = ""
    note: str = ""
    patient_code: Optional[int] = None
    pat_name: str = ""
    in_out_patient: str = ""
    age: Optional[int] = None
    sex: str = ""
    lock: int = 0
