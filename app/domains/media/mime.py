"""파일 확장자 기반 MIME 타입 판별

MIME_TYPES는 플랫폼과 무관한 고정 값이며 항상 우선합니다. 표에 없는
확장자만 표준 라이브러리 mimetypes로 추정합니다.
"""

import mimetypes

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    # Video
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    # Audio
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    # Documents
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Text
    "txt": "text/plain",
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "xml": "application/xml",
    "md": "text/markdown",
    # Archives
    "zip": "application/zip",
    "rar": "application/x-rar-compressed",
    "7z": "application/x-7z-compressed",
    "tar": "application/x-tar",
    "gz": "application/gzip",
}


def guess_mime_type(filename: str) -> str:
    """확장자로 MIME 타입 추정 (알 수 없으면 application/octet-stream)"""
    if "." not in filename:
        return DEFAULT_MIME_TYPE
    ext = filename.rsplit(".", 1)[-1].lower()
    if ext in MIME_TYPES:
        return MIME_TYPES[ext]

    guessed, _ = mimetypes.guess_type(f"file.{ext}")
    return guessed or DEFAULT_MIME_TYPE


def is_raster_image(mime_type: str) -> bool:
    """변환 대상 래스터 이미지인지 여부 (SVG 등 벡터 제외)"""
    mime_type = mime_type.lower()
    return mime_type.startswith("image/") and "svg" not in mime_type
