import io
import os
from unittest.mock import patch

import pytest
from fastapi import HTTPException, UploadFile

from refugeeconnect.api.uploads import discard_uploads, persist_uploads
from refugeeconnect.database.config.config import settings


def stored_files() -> set:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    return set(os.listdir(settings.UPLOAD_DIR))


class TestPersistUploads:
    def test_rejected_file_removes_earlier_ones(self):
        before = stored_files()
        files = [
            UploadFile(file=io.BytesIO(b"abc"), filename="small.png"),
            UploadFile(file=io.BytesIO(b"far too large"), filename="large.png"),
        ]

        with patch.object(settings, "MAX_UPLOAD_BYTES", 4), pytest.raises(HTTPException) as exc:
            persist_uploads(files)

        assert exc.value.detail == "File too large"
        assert stored_files() == before

    def test_discard_uploads(self):
        before = stored_files()
        media = persist_uploads([UploadFile(file=io.BytesIO(b"%PDF"), filename="guide.pdf")])
        assert len(stored_files() - before) == 1

        discard_uploads(media)

        assert stored_files() == before
