"""
Shared fixtures for all tests.

factory-boy factories live here so both unit/ and integration/ can import them.
"""
import pytest
from datetime import date
from decimal import Decimal
from django.test import Client

import factory
from refdata.managers import reset_managers
from refdata.models import Exam, ExamType, Laboratory, Lot, MovementType, VaccineType


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

class VaccineTypeFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = VaccineType

    code = factory.Sequence(lambda n: chr(ord('A') + n % 26))
    description = factory.Sequence(lambda n: f'Vaccine type {n}')


class MovementTypeFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = MovementType

    code = factory.Sequence(lambda n: f'MT{n}')
    description = 'Charge from supplier'
    type = '+'


class LotFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Lot

    code = factory.Sequence(lambda n: f'LT{n:03d}')
    preparation_date = date(2020, 6, 24)
    due_date = date(2021, 6, 24)
    cost = Decimal('750.00')


class ExamTypeFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ExamType

    code = factory.Sequence(lambda n: f'T{n % 10}')
    description = 'Haematology'


class ExamFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Exam

    code = factory.Sequence(lambda n: f'EX{n}')
    description = 'Haemoglobin'
    exam_type = factory.SubFactory(ExamTypeFactory)
    procedure = 1


class LaboratoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Laboratory

    exam = factory.SubFactory(ExamFactory)
    material = 'Blood'
    exam_date = date(2023, 3, 1)
    result = 'POSITIVE'
    patient_code = 1
    pat_name = 'Alice Wang'
    in_out_patient = 'O'
    age = 38
    sex = 'F'


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def fresh_managers():
    """memory 后端的数据存在缓存的 manager 实例里，每个测试前后清空。"""
    reset_managers()
    yield
    reset_managers()


@pytest.fixture
def api_client():
    """Django test client for HTTP-level tests."""
    return Client()


@pytest.fixture
def memory_backend(settings):
    """Controllers use the in-memory manager instead of the database."""
    settings.REFDATA_MANAGER_BACKEND = 'memory'
    return settings


@pytest.fixture
def sample_lot_payload():
    """Minimal valid payload for POST /api/lots."""
    return {
        'code': 'LT001',
        'preparation_date': '2020-06-24',
        'due_date': '2021-06-24',
        'cost': '750.00',
    }
