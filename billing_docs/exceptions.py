class DocumentError(Exception):
    """문서 생성 서비스의 기본 예외."""


class InvalidArgument(DocumentError):
    """숫자가 아니거나 양수가 아닌 인자가 전달된 경우."""


class InvalidId(InvalidArgument):
    """문서 ID 가 양의 정수가 아닌 경우."""


class NotFound(DocumentError):
    """ID 에 해당하는 문서 레코드가 없는 경우."""


class AssetLoadFailure(DocumentError):
    """폰트 등 필수 에셋을 읽거나 해석할 수 없는 경우.

    로고는 선택 에셋이라 이 예외 대신 텍스트 대체로 처리된다.
    """


class RenderingInvariantViolation(DocumentError):
    """레이아웃 계산이 불가능한 치수를 만든 경우 (폭 <= 0, 한 페이지보다 큰 블록 등)."""
