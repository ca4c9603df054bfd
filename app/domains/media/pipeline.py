"""에셋 변환 파이프라인 (Pillow)

래스터 이미지에 대해 크기 변경과 포맷 변환을 수행합니다.
변환에 실패하면 원본 바이트와 원본 MIME 타입을 그대로 반환합니다.
CPU 작업이므로 비동기 라우트에서는 스레드풀로 호출합니다.
"""

import io
import math
from dataclasses import dataclass, field

from PIL import Image, ImageOps

from app.core.logging import get_logger
from app.domains.media.mime import is_raster_image
from app.domains.media.schemas import TransformParams

logger = get_logger(__name__)

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"

# 요청 포맷 → Pillow 저장 포맷
SAVE_FORMATS = {
    "webp": "WEBP",
    "avif": "AVIF",
    "jpeg": "JPEG",
    "png": "PNG",
}

OUTPUT_MIME_TYPES = {
    "WEBP": "image/webp",
    "AVIF": "image/avif",
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
}

LOSSY_FORMATS = {"JPEG", "WEBP", "AVIF"}

# 손상된 입력, 미지원 포맷 등 변환 실패로 간주하는 오류
TRANSFORM_ERRORS = (
    OSError,
    ValueError,
    KeyError,
    SyntaxError,
    EOFError,
    Image.DecompressionBombError,
)


@dataclass
class TransformResult:
    """변환 결과"""

    content: bytes
    mime_type: str
    headers: dict[str, str] = field(default_factory=dict)
    transformed: bool = False


def cache_headers() -> dict[str, str]:
    """에셋 응답 캐시 헤더

    저장 경로의 바이트는 업로드 후 변하지 않고, 변환 파라미터는 URL에
    포함되므로 원본과 변환본 모두 immutable로 캐시합니다.
    """
    return {"Cache-Control": IMMUTABLE_CACHE_CONTROL}


def _target_size(
    image: Image.Image, width: int | None, height: int | None
) -> tuple[int, int]:
    src_width, src_height = image.size
    if width and height:
        return width, height
    if width:
        return width, max(1, round(src_height * width / src_width))
    if height:
        return max(1, round(src_width * height / src_height)), height
    return src_width, src_height


def _resize(image: Image.Image, params: TransformParams) -> Image.Image:
    size = _target_size(image, params.width, params.height)

    # 한쪽 크기만 주어지면 fit과 무관하게 비율 유지
    if not (params.width and params.height):
        return image.resize(size, Image.Resampling.LANCZOS)

    if params.fit == "cover":
        return ImageOps.fit(
            image, size, Image.Resampling.LANCZOS, centering=params.centering
        )
    if params.fit == "contain":
        return ImageOps.pad(
            image, size, Image.Resampling.LANCZOS, centering=params.centering
        )
    if params.fit == "fill":
        return image.resize(size, Image.Resampling.LANCZOS)
    if params.fit == "inside":
        return ImageOps.contain(image, size, Image.Resampling.LANCZOS)

    # outside: 두 변이 모두 상자를 덮는 최소 크기 (잘라내지 않음)
    src_width, src_height = image.size
    scale = max(size[0] / src_width, size[1] / src_height)
    return image.resize(
        (math.ceil(src_width * scale), math.ceil(src_height * scale)),
        Image.Resampling.LANCZOS,
    )


def _flatten(image: Image.Image) -> Image.Image:
    """알파 채널을 흰 배경에 합성 (JPEG 출력용)"""
    if image.mode in ("RGBA", "LA") or (
        image.mode == "P" and "transparency" in image.info
    ):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def _encode(
    image: Image.Image, save_format: str, quality: int
) -> bytes:
    options: dict[str, object] = {}

    if save_format == "JPEG":
        image = _flatten(image)
    elif save_format in ("WEBP", "AVIF") and image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")

    if save_format in LOSSY_FORMATS:
        options["quality"] = quality
    elif save_format == "PNG":
        options["optimize"] = True

    buffer = io.BytesIO()
    image.save(buffer, format=save_format, **options)
    return buffer.getvalue()


def _apply(data: bytes, params: TransformParams) -> tuple[bytes, str]:
    with Image.open(io.BytesIO(data)) as source:
        source.load()
        source_format = source.format
        image = ImageOps.exif_transpose(source) or source

        if params.width or params.height:
            image = _resize(image, params)

        save_format = (
            SAVE_FORMATS[params.format] if params.format else source_format
        )
        if save_format not in OUTPUT_MIME_TYPES:
            raise ValueError(f"unsupported output format: {save_format}")

        content = _encode(image, save_format, params.quality)
        return content, OUTPUT_MIME_TYPES[save_format]


def transform(
    data: bytes, mime_type: str, params: TransformParams
) -> TransformResult:
    """에셋 바이트 변환

    Args:
        data: 원본 바이트
        mime_type: 원본 MIME 타입
        params: 변환 파라미터

    Returns:
        TransformResult (실패 또는 비대상이면 원본 그대로)
    """
    if not params.has_transforms or not is_raster_image(mime_type):
        return TransformResult(data, mime_type, cache_headers())

    try:
        content, output_mime = _apply(data, params)
    except TRANSFORM_ERRORS as e:
        logger.warning(
            "Image transform failed, serving original",
            extra={
                "mime_type": mime_type,
                "params": params,
                "error": f"{type(e).__name__}: {e}",
            },
        )
        return TransformResult(data, mime_type, cache_headers())

    logger.debug(
        "Image transformed",
        extra={
            "input_size": len(data),
            "output_size": len(content),
            "output_mime": output_mime,
        },
    )
    return TransformResult(content, output_mime, cache_headers(), True)
