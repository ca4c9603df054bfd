"""에셋 변환 파이프라인 테스트"""

import io

import pytest
from PIL import Image

from app.domains.media.mime import guess_mime_type, is_raster_image
from app.domains.media.pipeline import IMMUTABLE_CACHE_CONTROL, transform
from app.domains.media.schemas import TransformParams


def _png(width: int = 400, height: int = 200, mode: str = "RGB") -> bytes:
    color = (255, 0, 0, 128) if mode == "RGBA" else (255, 0, 0)
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def _open(content: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(content))
    image.load()
    return image


class TestMime:
    """MIME 타입 판별 테스트"""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("report.PDF", "application/pdf"),
            ("photo.jpg", "image/jpeg"),
            ("deck.pptx", "application/vnd.openxmlformats-officedocument.presentationml.presentation"),
            ("scan.TIF", "image/tiff"),
            ("README", "application/octet-stream"),
            ("archive.unknown", "application/octet-stream"),
        ],
    )
    def test_guess_mime_type(self, filename, expected):
        assert guess_mime_type(filename) == expected

    def test_svg_is_not_raster(self):
        assert is_raster_image("image/png") is True
        assert is_raster_image("image/svg+xml") is False
        assert is_raster_image("application/pdf") is False


class TestTransformParams:
    """쿼리 파라미터 파싱 테스트"""

    def test_defaults(self):
        params = TransformParams.from_query({})

        assert params.quality == 80
        assert params.fit == "cover"
        assert params.gravity == "center"
        assert params.has_transforms is False

    def test_invalid_values_are_ignored(self):
        """잘못된 값은 무시하거나 기본값으로 대체"""
        params = TransformParams.from_query(
            {"w": "abc", "h": "-5", "q": "500", "f": "bmp", "fit": "stretch", "g": "up"}
        )

        assert params.width is None
        assert params.height is None
        assert params.quality == 100
        assert params.format is None
        assert params.fit == "cover"
        assert params.gravity == "center"

    def test_jpg_alias_and_clamp(self):
        params = TransformParams.from_query({"f": "JPG", "w": "99999"})

        assert params.format == "jpeg"
        assert params.width == 8192
        assert params.has_transforms is True


class TestTransform:
    """변환 테스트"""

    def test_passthrough_without_params(self):
        """변환 파라미터가 없으면 원본 그대로"""
        data = _png()

        result = transform(data, "image/png", TransformParams())

        assert result.content == data
        assert result.mime_type == "image/png"
        assert result.transformed is False
        assert result.headers["Cache-Control"] == IMMUTABLE_CACHE_CONTROL

    def test_non_image_passthrough(self):
        """이미지가 아니면 변환하지 않음"""
        result = transform(b"%PDF", "application/pdf", TransformParams(width=100))

        assert result.content == b"%PDF"
        assert result.mime_type == "application/pdf"

    def test_resize_width_keeps_aspect_ratio(self):
        """한쪽 크기만 주어지면 비율 유지"""
        result = transform(_png(400, 200), "image/png", TransformParams(width=100))

        assert result.transformed is True
        assert _open(result.content).size == (100, 50)

    def test_resize_height_keeps_aspect_ratio(self):
        result = transform(_png(400, 200), "image/png", TransformParams(height=50))

        assert result.transformed is True
        assert _open(result.content).size == (100, 50)

    def test_cover_crops_to_exact_size(self):
        params = TransformParams(width=100, height=100, fit="cover")

        result = transform(_png(400, 200), "image/png", params)

        assert _open(result.content).size == (100, 100)

    def test_inside_fits_within_box(self):
        params = TransformParams(width=100, height=100, fit="inside")

        result = transform(_png(400, 200), "image/png", params)

        assert _open(result.content).size == (100, 50)

    def test_outside_covers_box(self):
        params = TransformParams(width=100, height=100, fit="outside")

        result = transform(_png(400, 200), "image/png", params)

        assert _open(result.content).size == (200, 100)

    def test_format_conversion_to_webp(self):
        result = transform(_png(), "image/png", TransformParams(format="webp"))

        assert result.mime_type == "image/webp"
        assert _open(result.content).format == "WEBP"

    def test_jpeg_flattens_alpha(self):
        """JPEG 출력 시 알파 채널 제거"""
        result = transform(
            _png(mode="RGBA"), "image/png", TransformParams(format="jpeg", quality=60)
        )

        image = _open(result.content)
        assert result.mime_type == "image/jpeg"
        assert image.mode == "RGB"

    def test_corrupt_input_fails_open(self):
        """손상된 이미지는 원본 반환"""
        result = transform(b"not an image", "image/png", TransformParams(width=10))

        assert result.content == b"not an image"
        assert result.mime_type == "image/png"
        assert result.transformed is False
