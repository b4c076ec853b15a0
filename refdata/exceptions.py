"""
统一异常体系。

所有业务异常继承 BaseAppException，包含：
- type:        错误类型标识（validation_error / not_found / conflict / error）
- code:        业务错误码（VACCINE_TYPE_NOT_FOUND / LOT_ALREADY_PRESENT / ...）
- message:     人类可读的描述
- detail:      可选的附加信息（dict / list / None）
- http_status: HTTP 状态码

两类来源：
- Controller 层（views.py）抛出的 API 异常：NotFoundError / ConflictError / OperationFailedError
- Manager 层（managers/）抛出的 ServiceError 及其子类，由 controller 包装后再抛出

View 层只需 raise，exception_handler 统一捕获并格式化响应。
"""


class BaseAppException(Exception):
    """所有业务异常的基类。"""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500

    def __init__(self, message, code=None, detail=None, http_status=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        super().__init__(message)


class ValidationError(BaseAppException):
    """输入验证失败，400。"""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400


class NotFoundError(BaseAppException):
    """按 code 查不到记录，404。"""

    type = 'not_found'
    code = 'NOT_FOUND'
    http_status = 404


class ConflictError(BaseAppException):
    """code 已被占用，409。"""

    type = 'conflict'
    code = 'ALREADY_PRESENT'
    http_status = 409


class OperationFailedError(BaseAppException):
    """
    Manager 调用失败后由 controller 包装的错误（not created / not updated / not deleted）。

    只带面向用户的 message，不泄漏底层原因；原因在日志里。
    """

    type = 'error'
    code = 'OPERATION_FAILED'
    http_status = 400


# ── Manager 层异常 ──────────────────────────────────────────────────────────

class ServiceError(BaseAppException):
    """持久层通用失败。没被 controller 包装时按 500 返回。"""

    type = 'error'
    code = 'SERVICE_ERROR'
    http_status = 500


class DuplicateCodeError(ServiceError):
    """create 时 code 已存在。"""

    code = 'DUPLICATE_CODE'
    http_status = 409


class StaleLockError(ServiceError):
    """update 时 lock 版本号已过期（记录被别人改过）。"""

    code = 'STALE_LOCK'
    http_status = 409
