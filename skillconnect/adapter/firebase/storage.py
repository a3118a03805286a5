"""Cloud Storage for Firebase client.

Uploads go through the Firebase Storage REST endpoint used by the client
SDKs. The upload response carries a download token; the public download
URL is built from it, as ``getDownloadURL`` does.
"""

from typing import Optional
from uuid import uuid4

import httpx
import logfire

from skillconnect.adapter.error import ProviderError
from skillconnect.domain.service.profile_service import BlobStore
from skillconnect.domain.value import BlobHandle

DEFAULT_BASE_URL = "https://firebasestorage.googleapis.com/v0"


class FirebaseStorageError(ProviderError):
    """Firebase Storage error."""

    pass


class FirebaseBlobStore(BlobStore):
    """Base class for Firebase blob stores.

    Provides type distinction for dependency injection.
    """

    pass


class RealFirebaseBlobStore(FirebaseBlobStore):
    """Blob store backed by the Firebase Storage REST API."""

    def __init__(
        self,
        bucket: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize Firebase Storage client.

        Args:
            bucket: Storage bucket name
            base_url: Firebase Storage base URL
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests pass a MockTransport)
        """
        self.bucket = bucket
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        auth_token: Optional[str] = None,
    ) -> BlobHandle:
        """Upload bytes to ``path`` in the bucket.

        Raises:
            FirebaseStorageError: If the upload fails
        """
        url = f"{self.base_url}/b/{self.bucket}/o"
        headers = {"Content-Type": content_type}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"

        try:
            async with httpx.AsyncClient(
                transport=self.transport, timeout=self.timeout
            ) as client:
                response = await client.post(
                    url, params={"name": path}, content=data, headers=headers
                )
        except httpx.HTTPError as e:
            logfire.error("Firebase Storage HTTP error", path=path, error=str(e))
            raise FirebaseStorageError(f"HTTP error uploading {path}: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "Firebase Storage upload failed",
                path=path,
                status_code=response.status_code,
                error=response.text,
            )
            raise FirebaseStorageError(
                f"Upload of {path} failed: {response.status_code}"
            )

        metadata = response.json()
        token = (metadata.get("downloadTokens") or "").split(",")[0] or None
        logfire.info("Blob uploaded", bucket=self.bucket, path=path, size=len(data))
        return BlobHandle(bucket=self.bucket, path=path, download_token=token)

    async def get_download_url(self, handle: BlobHandle) -> str:
        """Build the token-authorized download URL of an object."""
        url = f"{self.base_url}/b/{handle.bucket}/o/{handle.encoded_path}?alt=media"
        if handle.download_token:
            url += f"&token={handle.download_token}"
        return url


class MockBlobStore(FirebaseBlobStore):
    """Mock blob store for testing.

    Keeps uploaded objects in memory.
    """

    def __init__(self, bucket: str = "mock-bucket") -> None:
        """Initialize an empty mock bucket."""
        self.bucket = bucket
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        auth_token: Optional[str] = None,
    ) -> BlobHandle:
        """Store the object in memory."""
        self.objects[path] = (data, content_type)
        return BlobHandle(bucket=self.bucket, path=path, download_token=uuid4().hex)

    async def get_download_url(self, handle: BlobHandle) -> str:
        """Return a fake download URL."""
        return (
            f"https://storage.example.com/{handle.bucket}/{handle.encoded_path}"
            f"?token={handle.download_token}"
        )
