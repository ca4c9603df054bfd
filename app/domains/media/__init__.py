"""Media 도메인 모듈

공개 에셋의 이미지 변환(크기/포맷)과 MIME 판별을 담당합니다.
"""

from app.domains.media.mime import guess_mime_type, is_raster_image
from app.domains.media.pipeline import TransformResult, transform
from app.domains.media.schemas import TransformParams

__all__ = [
    "TransformParams",
    "TransformResult",
    "transform",
    "guess_mime_type",
    "is_raster_image",
]
