from __future__ import annotations

import os
import uuid
from typing import Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.app_logger import get_logger
from ..core.constants import ALLOWED_PICTURE_EXTENSIONS
from ..core.exceptions import InvalidInput

logger = get_logger("uploads")


class ProfilePictureStorage:
    """Profile pictures on local disk under `<upload_folder>/<folder>/`.

    Stored paths use forward slashes so they can be handed to clients as-is.
    """

    def __init__(self, upload_folder: str):
        self._root = upload_folder

    def _folder(self, folder: str) -> str:
        return os.path.join(self._root, folder)

    @staticmethod
    def _validate(file: Optional[FileStorage]) -> str:
        if file is None or not file.filename:
            raise InvalidInput("profileImage file is required")

        filename = secure_filename(file.filename)
        ext = filename.rsplit(".", 1)[1].lower() if "." in filename else ""
        if ext not in ALLOWED_PICTURE_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_PICTURE_EXTENSIONS))
            raise InvalidInput(f"profile picture must be one of: {allowed}")

        try:
            with Image.open(file.stream) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise InvalidInput("uploaded file is not a valid image")
        finally:
            file.stream.seek(0)

        return filename

    def save(self, file: Optional[FileStorage], *, folder: str) -> str:
        filename = self._validate(file)
        target_dir = self._folder(folder)
        os.makedirs(target_dir, exist_ok=True)

        path = os.path.join(target_dir, f"{uuid.uuid4().hex}_{filename}")
        file.save(path)
        logger.info("saved profile picture %s", path)
        return path.replace("\\", "/")

    def delete(self, path: Optional[str]) -> bool:
        """Remove a previously stored picture; paths outside the upload folder are left alone."""

        if not path:
            return False
        root = os.path.abspath(self._root)
        target = os.path.abspath(path)
        if os.path.commonpath([root, target]) != root:
            logger.warning("refusing to delete %s outside upload folder", path)
            return False
        if not os.path.exists(target):
            return False
        os.remove(target)
        return True
