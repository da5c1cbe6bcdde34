# travelhub/core/exceptions.py
"""
서비스 계층에서 발생시키고 create_app 의 전역 에러 핸들러가 HTTP 응답으로 변환하는 예외들.
입력값 검증 오류는 marshmallow.ValidationError 를 그대로 사용합니다.
"""


class TravelHubError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"
    default_message = "요청을 처리하는 중 오류가 발생했습니다."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ResourceNotFoundError(TravelHubError):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"
    default_message = "요청한 리소스를 찾을 수 없습니다."


class ForbiddenError(TravelHubError):
    status_code = 403
    error_code = "FORBIDDEN"
    default_message = "이 작업을 수행할 권한이 없습니다."


class ConflictError(TravelHubError):
    status_code = 409
    error_code = "CONFLICT"
    default_message = "이미 존재하는 리소스입니다."


class ServiceUnavailableError(TravelHubError):
    status_code = 503
    error_code = "SERVICE_UNAVAILABLE"
    default_message = "데이터베이스에 연결할 수 없습니다. 잠시 후 다시 시도해 주세요."
