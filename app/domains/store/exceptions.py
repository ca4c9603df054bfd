"""Store 도메인 예외 정의"""


class StoreUnavailableError(Exception):
    """백엔드 저장소에 연결할 수 없는 경우

    HTTP 예외가 아니라 어댑터 경계의 신호입니다. 읽기 경로에서는
    데모 데이터로 대체되고, 쓰기 경로에서는 UpstreamUnavailableException으로
    변환됩니다.
    """

    def __init__(self, operation: str, reason: str = ""):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}" if reason else operation)
