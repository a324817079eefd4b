from __future__ import annotations

import asyncio
import os
from typing import Any

import aiofiles.os
import boto3
from attachable.core.exceptions import StorageError
from attachable.core.logging import get_logger
from attachable.libs.storage.interface import StorageInterface
from attachable.libs.storage.schemas import S3Configuration
from attachable.libs.storage.utils import resolve_path_segment
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

logger = get_logger(__name__)


class S3Storage(StorageInterface):
    """
    S3 storage backend.

    Objects are keyed ``<key_prefix>/<attribute>/<basename>`` and the key is
    the stored identifier.
    """

    name = "s3"

    def __init__(self, config: S3Configuration):
        self.config = config
        self.client = boto3.client(
            "s3",
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
            region_name=config.region_name,
            endpoint_url=config.endpoint_url,
        )
        self.bucket_name = config.bucket_name

    def get_key(self, filename: str, attribute: str, instance: Any) -> str:
        prefix = resolve_path_segment(self.config.key_prefix, attribute, instance)
        return "/".join(part for part in (prefix, attribute, os.path.basename(filename)) if part)

    async def write(self, filename: str, attribute: str, instance: Any) -> str:
        """
        Upload a file to S3.

        Args:
            filename (str): The local file to upload
            attribute (str): Attribute the file is attached to
            instance (Any): The model instance

        Returns:
            str: The S3 key of the uploaded file

        Raises:
            StorageError: If the upload fails
        """

        key = self.get_key(filename, attribute, instance)

        try:
            await asyncio.to_thread(self.client.upload_file, filename, self.bucket_name, key)
        except (BotoCoreError, ClientError, NoCredentialsError) as e:
            raise StorageError(self, f"Failed to upload file to S3: {str(e)}", attribute=attribute) from e

        if self.config.remove_source:
            await aiofiles.os.remove(filename)

        logger.debug(f"Uploaded {filename} to s3://{self.bucket_name}/{key}")
        return key

    async def remove(self, identifier: str, attribute: str, instance: Any) -> None:
        """
        Delete an object from S3. Deleting a missing key succeeds.

        Raises:
            StorageError: If the deletion fails
        """

        try:
            await asyncio.to_thread(self.client.delete_object, Bucket=self.bucket_name, Key=identifier)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "NoSuchKey":
                logger.warning(f"S3 object {identifier} does not exist")
                return
            raise StorageError(self, f"Failed to delete file from S3: {str(e)}", attribute=attribute) from e
        except (BotoCoreError, NoCredentialsError) as e:
            raise StorageError(self, f"Failed to delete file from S3: {str(e)}", attribute=attribute) from e
