import unittest
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from user_directory.app.core.errors import register_exception_handlers
from user_directory.app.modules.upload.router import router as upload_router
from user_directory.services.media import MediaStorageError
from user_directory.tests._util_deps import FakeMediaStore


class _FailingMediaStore(FakeMediaStore):
    def store(self, content, *, filename, content_type=None):
        raise MediaStorageError("Cloudinary HTTP 502")


class _Deps:
    def __init__(self, media_store):
        self.media_store = media_store


class TestUploadAPI(unittest.TestCase):
    def _client(self, media_store) -> TestClient:
        app = FastAPI()
        app.state.deps = _Deps(media_store)
        register_exception_handlers(app)
        app.include_router(upload_router, prefix="/api")
        return TestClient(app)

    def test_upload_image(self):
        media = FakeMediaStore()
        with self._client(media) as client:
            resp = client.post("/api/upload", files={"file": ("me.png", b"\x89PNG data", "image/png")})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {
                "success": True,
                "url": "https://media.example.com/me.png",
                "public_id": "user-profiles/me.png",
            },
        )
        self.assertEqual(media.stored[0]["content"], b"\x89PNG data")
        self.assertEqual(media.stored[0]["content_type"], "image/png")

    def test_missing_file_is_400(self):
        with self._client(FakeMediaStore()) as client:
            resp = client.post("/api/upload")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "No file uploaded")

    def test_non_image_is_400(self):
        media = FakeMediaStore()
        with self._client(media) as client:
            resp = client.post("/api/upload", files={"file": ("notes.txt", b"hello", "text/plain")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(media.stored, [])

    def test_too_large_is_400(self):
        from user_directory.app.core.config import settings

        payload = b"0" * (settings.MAX_UPLOAD_SIZE + 1)
        with self._client(FakeMediaStore()) as client:
            resp = client.post("/api/upload", files={"file": ("big.jpg", payload, "image/jpeg")})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "File too large")

    def test_oversized_upload_is_read_only_up_to_the_limit(self):
        from user_directory.app.core.config import settings

        read_sizes = []
        original_read = UploadFile.read

        async def _recording_read(upload, size=-1):
            read_sizes.append(size)
            return await original_read(upload, size)

        media = FakeMediaStore()
        payload = b"0" * (settings.MAX_UPLOAD_SIZE * 3)
        with patch.object(UploadFile, "read", _recording_read):
            with self._client(media) as client:
                resp = client.post("/api/upload", files={"file": ("big.png", payload, "image/png")})

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["message"], "File too large")
        self.assertEqual(read_sizes, [settings.MAX_UPLOAD_SIZE + 1])
        self.assertEqual(media.stored, [])

    def test_upstream_failure_is_500(self):
        with self._client(_FailingMediaStore()) as client:
            resp = client.post("/api/upload", files={"file": ("me.gif", b"GIF89a", "image/gif")})
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(),
            {"success": False, "message": "Failed to upload image", "error": "Cloudinary HTTP 502"},
        )


if __name__ == "__main__":
    unittest.main()
