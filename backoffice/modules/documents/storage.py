import boto3
from botocore.exceptions import ClientError
from backoffice.config import settings
from supabase import Client
import logging

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Public bucket in Supabase Storage"""

    def __init__(self, supabase: Client, bucket_name: str = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.documents_bucket

    def upload_file(self, file_content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        """Upload file to the bucket and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket_name)
        bucket.upload(key, file_content, file_options={"content-type": content_type})
        return bucket.get_public_url(key)

    def delete_file(self, key: str) -> bool:
        try:
            self.supabase.storage.from_(self.bucket_name).remove([key])
            return True
        except Exception as e:
            logger.error(f"Failed to delete file from storage: {str(e)}")
            return False


class S3Storage:
    def __init__(self):
        if not settings.s3_configured:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name
        self.region = settings.aws_region

    def upload_file(self, file_content: bytes, key: str, content_type: str = "application/octet-stream") -> str:
        """Upload file to S3 and return its public https URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

    def delete_file(self, key: str) -> bool:
        """Delete file from S3"""
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            logger.error(f"Failed to delete file from S3: {str(e)}")
            return False


def build_storage(supabase: Client):
    """S3 when credentials are configured, otherwise Supabase Storage"""
    if settings.s3_configured:
        try:
            storage = S3Storage()
            logger.info("S3 storage initialized successfully")
            return storage
        except Exception as e:
            logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
    return SupabaseStorage(supabase)
