"""이미지 변환 파라미터"""

from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_QUALITY = 80
MAX_DIMENSION = 8192

OUTPUT_FORMATS = {"webp", "avif", "jpeg", "png"}
FORMAT_ALIASES = {"jpg": "jpeg"}

FIT_MODES = {"cover", "contain", "fill", "inside", "outside"}

# 기준점 → Pillow centering (x, y)
GRAVITY_CENTERING = {
    "center": (0.5, 0.5),
    "centre": (0.5, 0.5),
    "north": (0.5, 0.0),
    "south": (0.5, 1.0),
    "east": (1.0, 0.5),
    "west": (0.0, 0.5),
    "northeast": (1.0, 0.0),
    "northwest": (0.0, 0.0),
    "southeast": (1.0, 1.0),
    "southwest": (0.0, 1.0),
    "top": (0.5, 0.0),
    "bottom": (0.5, 1.0),
    "right": (1.0, 0.5),
    "left": (0.0, 0.5),
}


def _parse_dimension(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    if number <= 0:
        return None
    return min(number, MAX_DIMENSION)


def _parse_quality(value: Optional[str]) -> int:
    if value is None:
        return DEFAULT_QUALITY
    try:
        number = int(value)
    except ValueError:
        return DEFAULT_QUALITY
    return max(1, min(100, number))


@dataclass(frozen=True)
class TransformParams:
    """쿼리 파라미터 w, h, q, f, fit, g 로부터 만든 변환 요청"""

    width: Optional[int] = None
    height: Optional[int] = None
    quality: int = DEFAULT_QUALITY
    format: Optional[str] = None
    fit: str = "cover"
    gravity: str = "center"

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "TransformParams":
        """쿼리 파싱 (잘못된 값은 무시하거나 기본값으로 대체)"""
        fmt = (query.get("f") or "").strip().lower()
        fmt = FORMAT_ALIASES.get(fmt, fmt)

        fit = (query.get("fit") or "cover").strip().lower()
        gravity = (query.get("g") or "center").strip().lower()

        return cls(
            width=_parse_dimension(query.get("w")),
            height=_parse_dimension(query.get("h")),
            quality=_parse_quality(query.get("q")),
            format=fmt if fmt in OUTPUT_FORMATS else None,
            fit=fit if fit in FIT_MODES else "cover",
            gravity=gravity if gravity in GRAVITY_CENTERING else "center",
        )

    @property
    def has_transforms(self) -> bool:
        """크기 변경 또는 포맷 변환이 요청되었는지 여부"""
        return bool(self.width or self.height or self.format)

    @property
    def centering(self) -> tuple[float, float]:
        return GRAVITY_CENTERING[self.gravity]
