# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles file upload / public URL / delete operations with Supabase Storage.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class StorageUploadError(SupabaseClientError):
    """Raised when file upload to storage fails."""
    default_code = "STORAGE_UPLOAD_ERROR"


class StorageService:
    """
    Service for Supabase Storage operations.

    All methods take the bucket explicitly; avatars live in settings.AVATAR_BUCKET.
    """

    @staticmethod
    def upload_file(
        bucket: str,
        path: str,
        file_content: bytes,
        content_type: str,
        cache_control: str = "3600",
    ) -> str:
        """
        Upload raw bytes to storage, overwriting any existing object.

        Returns:
            Storage path where the file was uploaded

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=file_content,
                file_options={
                    "content-type": content_type,
                    "cache-control": cache_control,
                    "upsert": "true",
                }
            )

            logger.info(f"Uploaded file to storage: {bucket}/{path}")
            return path

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(
                f"Failed to upload file to storage: {e}",
                suggestion="Try again later or contact support if the issue persists",
                details={"bucket": bucket, "path": path},
            )

    @staticmethod
    def get_public_url(bucket: str, storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Raises:
            SupabaseClientError: If the URL cannot be built
        """
        client = SupabaseClient.get_client()

        try:
            return client.storage.from_(bucket).get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise SupabaseClientError(
                f"Failed to get public URL: {e}",
                code="PUBLIC_URL_FAILED",
                details={"bucket": bucket, "path": storage_path},
            )

    @staticmethod
    def delete_file(bucket: str, storage_path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([storage_path])
            logger.info(f"Deleted file from storage: {bucket}/{storage_path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file: {e}")
            return False
