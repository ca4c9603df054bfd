"""S3/MinIO Storage 서비스

공개 에셋 원본 바이트를 오브젝트 스토리지에서 읽어오기 위한 S3 클라이언트
"""

from functools import lru_cache

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings, settings
from app.core.exceptions import ErrorCode, StorageException
from app.core.logging import get_logger

logger = get_logger(__name__)

# 객체가 없음을 뜻하는 S3 에러 코드
MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Client:
    """S3/MinIO 클라이언트

    에셋의 storage_path(버킷 내 객체 키)로 원본 바이트를 조회합니다.
    """

    def __init__(self, settings: Settings):
        """S3 클라이언트 초기화

        Args:
            settings: 애플리케이션 설정
        """
        self.settings = settings
        self.bucket = settings.s3_bucket_assets

        # boto3 클라이언트 초기화
        self.client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},  # MinIO 호환
            ),
            use_ssl=settings.s3_use_ssl,
        )

        logger.info(
            "S3 Client initialized",
            extra={
                "endpoint": settings.s3_endpoint,
                "bucket": self.bucket,
                "region": settings.s3_region,
            },
        )

    def upload_object(
        self, storage_path: str, content: bytes, content_type: str
    ) -> str:
        """객체 업로드 (테스트와 데이터 시딩용)

        Returns:
            업로드된 객체 키
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=storage_path,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.exception(
                "S3 upload failed",
                extra={"bucket": self.bucket, "key": storage_path},
            )
            raise StorageException(
                message="파일 업로드에 실패했습니다.",
                detail={"storage_path": storage_path, "error": str(e)},
            )

        logger.info(
            "Object uploaded to S3",
            extra={
                "bucket": self.bucket,
                "key": storage_path,
                "size": len(content),
            },
        )
        return storage_path

    def download_object(self, storage_path: str) -> bytes:
        """객체 원본 바이트 다운로드

        Args:
            storage_path: 버킷 내 객체 키

        Returns:
            객체 내용 (bytes)

        Raises:
            StorageException: 객체가 없거나 다운로드에 실패한 경우
        """
        try:
            response = self.client.get_object(
                Bucket=self.bucket,
                Key=storage_path,
            )
            content: bytes = response["Body"].read()
        except ClientError as e:
            error_code_str = e.response.get("Error", {}).get("Code", "")

            if error_code_str in MISSING_OBJECT_CODES:
                logger.warning(
                    "Object not found in S3",
                    extra={"bucket": self.bucket, "key": storage_path},
                )
                raise StorageException(
                    message="파일을 찾을 수 없습니다.",
                    error_code=ErrorCode.OBJECT_NOT_FOUND,
                    detail={"storage_path": storage_path},
                )

            logger.exception(
                "S3 download failed",
                extra={"bucket": self.bucket, "key": storage_path},
            )
            raise StorageException(
                message="파일 다운로드에 실패했습니다.",
                error_code=ErrorCode.S3_DOWNLOAD_FAILED,
                detail={"storage_path": storage_path, "error": str(e)},
            )
        except BotoCoreError as e:
            # 엔드포인트 연결 실패 등
            logger.exception(
                "S3 connection failed",
                extra={"bucket": self.bucket, "key": storage_path},
            )
            raise StorageException(
                message="파일 저장소에 연결할 수 없습니다.",
                error_code=ErrorCode.S3_DOWNLOAD_FAILED,
                detail={"storage_path": storage_path, "error": str(e)},
            )

        logger.debug(
            "Object downloaded from S3",
            extra={
                "bucket": self.bucket,
                "key": storage_path,
                "size": len(content),
            },
        )
        return content


@lru_cache
def _create_s3_client() -> S3Client:
    """S3 클라이언트 싱글톤 생성 (캐시됨)"""
    return S3Client(settings)


def get_s3_client() -> S3Client:
    """FastAPI DI용 S3 클라이언트 의존성"""
    return _create_s3_client()
