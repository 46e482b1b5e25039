from typing import Optional
from urllib.parse import quote

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.exceptions import BotoCoreError, ClientError

from .base import BaseVideoStore, StorageError
from .responses import CODE_NOT_FOUND, CODE_OK, TIER_KEYS, build_payload
from vodsync.logger import setup_logging

logger = setup_logging(logger_name="storage")

NOT_FOUND_ERROR_CODES = {"404", "NoSuchKey", "NotFound"}

# Object metadata written by the transcoder next to each uploaded episode
COVER_METADATA_KEY = "video-cover"
PLAY_URL_METADATA_PREFIX = "play-url-"


class CloudVideoStore(BaseVideoStore):
    """A video store backed by an S3-compatible bucket (DigitalOcean Spaces, COS, S3)."""

    def __init__(
        self,
        bucket_name: str,
        endpoint: str,
        key_id: str,
        access_key: str,
        region: str = "ams3",
        chunk_size: int = 1024 * 1024,
        client=None,
    ):
        if not bucket_name or not endpoint:
            raise ValueError("Cloud video store needs a bucket name and an endpoint")
        super().__init__(bucket_name)
        self.endpoint = endpoint.rstrip("/")
        self.transfer_config = TransferConfig(
            multipart_threshold=chunk_size, multipart_chunksize=chunk_size
        )

        if client is None:
            session = boto3.session.Session()
            client = session.client(
                "s3",
                region_name=region,
                endpoint_url=self.endpoint,
                aws_access_key_id=key_id,
                aws_secret_access_key=access_key,
            )
        self.client = client

    @classmethod
    def from_config(cls, config) -> "CloudVideoStore":
        return cls(
            bucket_name=config.bucket_name,
            endpoint=config.bucket_endpoint,
            key_id=config.bucket_key_id,
            access_key=config.bucket_access_key,
            region=config.bucket_region,
            chunk_size=config.upload_chunk_size,
        )

    def _get_absolute_url(self, key: str) -> str:
        """Public URL of an object (virtual-hosted style)."""
        protocol, _, path = self.endpoint.partition("://")
        return f"{protocol}://{self.bucket_name}.{path}/{quote(key)}"

    def _head(self, key: str) -> Optional[dict]:
        """head_object that maps a 404 to None and other failures to StorageError."""
        try:
            return self.client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            error = e.response.get("Error", {})
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if str(error.get("Code")) in NOT_FOUND_ERROR_CODES or status == 404:
                return None
            raise StorageError(f"head_object failed for {key}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"head_object failed for {key}: {e}") from e

    def folder_stat(self, title: str) -> str:
        key = self._folder_key(title)
        if self._head(key) is None:
            return build_payload(CODE_NOT_FOUND, "ERROR_CMD_COS_FOLDER_NOT_EXIST")
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def create_folder(self, title: str) -> str:
        key = self._folder_key(title)
        try:
            self.client.put_object(Bucket=self.bucket_name, Key=key, Body=b"")
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to create folder {key}: {e}") from e
        logger.info(f"Created folder {key} in bucket {self.bucket_name}")
        return build_payload(CODE_OK, "SUCCESS", {"name": title})

    def file_stat(self, title: str, episode_label: str) -> str:
        key = self._object_key(title, episode_label)
        head = self._head(key)
        if head is None:
            return build_payload(CODE_NOT_FOUND, "ERROR_CMD_COS_FILE_NOT_EXIST")

        metadata = {k.lower(): v for k, v in (head.get("Metadata") or {}).items()}
        data = {
            "filelen": int(head.get("ContentLength", 0)),
            "access_url": self._get_absolute_url(key),
            "video_cover": metadata.get(COVER_METADATA_KEY),
            "video_play_url": {
                wire_key: metadata.get(f"{PLAY_URL_METADATA_PREFIX}{wire_key}")
                for wire_key in TIER_KEYS.values()
            },
        }
        return build_payload(CODE_OK, "SUCCESS", data)

    def upload_file(self, title: str, episode_label: str, local_path: str) -> str:
        key = self._object_key(title, episode_label)
        try:
            self.client.upload_file(
                local_path,
                self.bucket_name,
                key,
                ExtraArgs={"ContentType": "video/mp4"},
                Config=self.transfer_config,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload {local_path} to {key}: {e}") from e
        return build_payload(
            CODE_OK, "SUCCESS", {"access_url": self._get_absolute_url(key)}
        )

    def delete_file(self, title: str, episode_label: str) -> str:
        key = self._object_key(title, episode_label)
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to delete {key}: {e}") from e
        return build_payload(CODE_OK, "SUCCESS")
