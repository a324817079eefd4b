from collections.abc import Callable
from typing import Any

from pydantic import BaseModel

# (attribute, instance) -> path segment
PathResolver = Callable[[str, Any], str]


class LocalFsConfiguration(BaseModel):
    """
    Schema for local filesystem storage.

    Attributes:
        path_to_public (str): Directory served publicly, files are stored below it.
        public_basepath (str | PathResolver): Sub directory (and URL prefix) for
            stored files, or a callable receiving the attribute and instance.
    """

    path_to_public: str
    public_basepath: str | PathResolver = ""


class S3Configuration(BaseModel):
    """
    Schema for S3 storage.

    Attributes:
        bucket_name (str): The S3 bucket name.
        region_name (str): The AWS region name.
        access_key_id (str): AWS access key ID.
        secret_access_key (str): AWS secret access key.
        endpoint_url (str | None): Custom endpoint URL for S3-compatible services.
        key_prefix (str | PathResolver): Prefix of object keys, or a callable
            receiving the attribute and instance.
        remove_source (bool): Remove the local file once uploaded.
    """

    bucket_name: str
    region_name: str
    access_key_id: str
    secret_access_key: str
    endpoint_url: str | None = None
    key_prefix: str | PathResolver = "uploads"
    remove_source: bool = True
