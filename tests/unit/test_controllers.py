"""
Controller tests over the in-memory manager (REFDATA_MANAGER_BACKEND=memory).

走完整 HTTP 路径（urls → view → controller → InMemoryManager），但不碰数据库。
另外用 stub manager 验证 service error 的包装 / 冒泡。
"""
import json
import pytest
from unittest.mock import patch

from refdata.controllers import LotController
from refdata.exceptions import ServiceError


def call(api_client, method, path, payload=None):
    """快捷方式：发请求，返回 (status_code, body)。"""
    kwargs = {}
    if payload is not None:
        kwargs = {'data': json.dumps(payload), 'content_type': 'application/json'}
    response = getattr(api_client, method)(path, **kwargs)
    body = json.loads(response.content) if response.content else None
    return response.status_code, body


def seed_exam(api_client):
    """建好 HE 检查类型和 HB 检查，返回 HB 的请求体。"""
    exam = {
        'code': 'HB',
        'description': 'Haemoglobin',
        'exam_type': {'code': 'HE', 'description': 'Haematology'},
    }
    call(api_client, 'post', '/api/examtypes', exam['exam_type'])
    call(api_client, 'post', '/api/exams', exam)
    return exam


@pytest.mark.usefixtures('memory_backend')
class TestVaccineTypeCrud:

    def test_empty_list_is_no_content(self, api_client):
        status, body = call(api_client, 'get', '/api/vaccinetypes')

        assert status == 204
        assert body is None

    def test_create_then_list(self, api_client):
        status, body = call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Child'})
        assert status == 201
        assert body == {'lock': 0, 'code': 'C', 'description': 'Child'}

        status, body = call(api_client, 'get', '/api/vaccinetypes')
        assert status == 200
        assert [item['code'] for item in body] == ['C']

    def test_duplicate_is_conflict(self, api_client):
        call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Child'})

        status, body = call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Other'})

        assert status == 409
        assert body['code'] == 'VACCINE_TYPE_ALREADY_PRESENT'
        assert body['message'] == 'Vaccine Type already present.'
        _, existing = call(api_client, 'get', '/api/vaccinetypes/C')
        assert existing['description'] == 'Child'

    def test_missing_required_field_never_reaches_manager(self, api_client):
        with patch.object(LotController, 'manager') as manager:
            status, body = call(api_client, 'post', '/api/lots', {'code': 'LT001'})

        assert status == 400
        assert body['type'] == 'validation_error'
        assert body['detail']['due_date'] == ['The due date is required']
        manager.create.assert_not_called()

    def test_update_bumps_lock(self, api_client):
        call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Child'})

        status, body = call(api_client, 'put', '/api/vaccinetypes', {'code': 'C', 'description': 'Children', 'lock': 0})

        assert status == 200
        assert body['description'] == 'Children'
        assert body['lock'] == 1

    def test_update_with_stale_lock_not_updated(self, api_client):
        call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Child'})
        call(api_client, 'put', '/api/vaccinetypes', {'code': 'C', 'description': 'v2', 'lock': 0})

        status, body = call(api_client, 'put', '/api/vaccinetypes', {'code': 'C', 'description': 'v3', 'lock': 0})

        assert status == 400
        assert body['code'] == 'VACCINE_TYPE_NOT_UPDATED'

    def test_update_unknown_code_not_found(self, api_client):
        status, body = call(api_client, 'put', '/api/vaccinetypes', {'code': 'Z', 'description': 'x'})

        assert status == 404
        assert body['code'] == 'VACCINE_TYPE_NOT_FOUND'

    def test_delete_and_check(self, api_client):
        call(api_client, 'post', '/api/vaccinetypes', {'code': 'C', 'description': 'Child'})
        assert call(api_client, 'get', '/api/vaccinetypes/check/C') == (200, True)

        assert call(api_client, 'delete', '/api/vaccinetypes/C') == (200, True)

        assert call(api_client, 'get', '/api/vaccinetypes/check/C') == (200, False)
        status, body = call(api_client, 'get', '/api/vaccinetypes/C')
        assert status == 404

    def test_delete_unknown_code_not_found(self, api_client):
        status, body = call(api_client, 'delete', '/api/vaccinetypes/Z')

        assert status == 404
        assert body['message'] == 'Vaccine Type not found.'

    def test_method_not_allowed_on_item(self, api_client):
        response = api_client.post('/api/vaccinetypes/C')
        assert response.status_code == 405


@pytest.mark.usefixtures('memory_backend')
class TestExamReferences:

    def test_unknown_exam_type_not_created(self, api_client):
        status, body = call(api_client, 'post', '/api/exams', {
            'code': 'HB',
            'description': 'Haemoglobin',
            'exam_type': {'code': 'ZZ', 'description': 'ghost'},
        })

        assert status == 400
        assert body['code'] == 'EXAM_NOT_CREATED'
        assert 'exam_type' in body['detail']
        assert call(api_client, 'get', '/api/exams/check/HB') == (200, False)

    def test_renders_stored_exam_type(self, api_client):
        call(api_client, 'post', '/api/examtypes', {'code': 'HE', 'description': 'Haematology'})

        status, body = call(api_client, 'post', '/api/exams', {
            'code': 'HB',
            'description': 'Haemoglobin',
            'exam_type': {'code': 'HE', 'description': 'WRONG'},
        })

        assert status == 201
        assert body['exam_type']['description'] == 'Haematology'
        _, fetched = call(api_client, 'get', '/api/exams/HB')
        assert fetched['exam_type'] == {'lock': 0, 'code': 'HE', 'description': 'Haematology'}

    def test_referenced_exam_type_not_deleted(self, api_client):
        seed_exam(api_client)

        status, body = call(api_client, 'delete', '/api/examtypes/HE')

        assert status == 400
        assert body['code'] == 'EXAM_TYPE_NOT_DELETED'
        assert call(api_client, 'get', '/api/examtypes/check/HE') == (200, True)


@pytest.mark.usefixtures('memory_backend')
class TestLaboratoryAutoCode:

    def test_server_assigns_code(self, api_client):
        exam = seed_exam(api_client)

        status, body = call(api_client, 'post', '/api/laboratories', {'code': 77, 'exam': exam, 'result': 'A'})

        assert status == 201
        assert body['code'] == 1
        assert body['exam']['exam_type']['code'] == 'HE'
        assert call(api_client, 'get', '/api/laboratories/check/1') == (200, True)

    def test_update_requires_code(self, api_client):
        exam = {
            'code': 'HB',
            'description': 'Haemoglobin',
            'exam_type': {'code': 'HE', 'description': 'Haematology'},
        }

        status, body = call(api_client, 'put', '/api/laboratories', {'exam': exam})

        assert status == 400
        assert body['detail']['code'] == ['The code is required']


class _BrokenManager:

    def list_all(self):
        raise ServiceError('Unable to list lots.')

    def is_code_present(self, code):
        raise ServiceError('Unable to check lot.')

    def find_by_code(self, code):
        return None

    def create(self, instance):
        return None


class TestServiceFailures:

    @pytest.fixture(autouse=True)
    def broken_manager(self):
        with patch.object(LotController, 'manager', _BrokenManager()):
            yield

    def test_list_failure_propagates_as_500(self, api_client):
        status, body = call(api_client, 'get', '/api/lots')

        assert status == 500
        assert body['code'] == 'SERVICE_ERROR'

    def test_check_failure_propagates_as_500(self, api_client):
        status, _ = call(api_client, 'get', '/api/lots/check/LT001')
        assert status == 500

    def test_create_returning_none_is_not_created(self, api_client, sample_lot_payload):
        status, body = call(api_client, 'post', '/api/lots', sample_lot_payload)

        assert status == 400
        assert body['code'] == 'LOT_NOT_CREATED'
        assert body['message'] == 'Lot not created.'
