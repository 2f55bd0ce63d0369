"""
Staging area for journal voice recordings.

Each user has at most one unsaved recording, kept under
`<root>/<user_id>/pending/`. Staging a new one or discarding releases it;
saving a journal entry claims it by moving it next to the user's kept files.
"""

import base64
import binascii
import logging
import os
import shutil
import uuid
from functools import lru_cache
from typing import Optional
from uuid import UUID

from app.core.config import AUDIO_STORAGE_DIR, MAX_RECORDING_BYTES
from app.journals.schemas import StagedRecording

logger = logging.getLogger(__name__)

SIMULATED_TRANSCRIPT = (
    "This is a simulated transcript of your audio recording. In a real application, "
    "this would be generated using a speech-to-text service."
)

EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
}


class RecordingError(ValueError):
    pass


class RecordingTooLarge(RecordingError):
    pass


class RecordingStore:
    def __init__(self, root: str, max_bytes: int = MAX_RECORDING_BYTES):
        self.root = root
        self.max_bytes = max_bytes

    def _pending_dir(self, user_id: UUID) -> str:
        return os.path.join(self.root, str(user_id), "pending")

    def _kept_dir(self, user_id: UUID) -> str:
        return os.path.join(self.root, str(user_id))

    def pending_recording(self, user_id: UUID) -> Optional[str]:
        """File name of the user's unsaved recording, if any."""
        pending = self._pending_dir(user_id)
        if not os.path.isdir(pending):
            return None
        names = sorted(os.listdir(pending))
        return names[0] if names else None

    def stage(self, user_id: UUID, audio_base64: str, content_type: str = "audio/wav") -> StagedRecording:
        """
        Decodes and stores an uploaded recording as the user's pending one.

        Args:
            user_id (UUID): Owner of the recording.
            audio_base64 (str): Audio bytes, base64 encoded. A data-URL prefix is accepted.
            content_type (str): MIME type, used for the file extension.

        Returns:
            StagedRecording: ID, relative URL, size and the placeholder transcript.

        Raises:
            RecordingError: If the payload is not valid base64 or is empty.
            RecordingTooLarge: If the decoded audio exceeds the size limit.
        """
        if "," in audio_base64 and audio_base64.startswith("data:"):
            audio_base64 = audio_base64.split(",", 1)[1]
        try:
            audio = base64.b64decode(audio_base64, validate=True)
        except (binascii.Error, ValueError):
            raise RecordingError("Recording is not valid base64 audio")
        if not audio:
            raise RecordingError("Recording is empty")
        if len(audio) > self.max_bytes:
            raise RecordingTooLarge(f"Recording exceeds {self.max_bytes} bytes")

        self.discard(user_id)
        pending = self._pending_dir(user_id)
        os.makedirs(pending, exist_ok=True)
        recording_id = f"{uuid.uuid4().hex}{EXTENSIONS.get(content_type, '.wav')}"
        with open(os.path.join(pending, recording_id), "wb") as f:
            f.write(audio)

        logger.info(f"Staged recording {recording_id} ({len(audio)} bytes) for user {user_id}")
        return StagedRecording(
            recording_id=recording_id,
            audio_url=f"recordings/{user_id}/pending/{recording_id}",
            size_bytes=len(audio),
            transcript=SIMULATED_TRANSCRIPT,
        )

    def discard(self, user_id: UUID) -> bool:
        """Deletes the user's unsaved recording. Returns whether one existed."""
        pending = self._pending_dir(user_id)
        if not os.path.isdir(pending):
            return False
        existed = bool(os.listdir(pending))
        shutil.rmtree(pending)
        if existed:
            logger.info(f"Released pending recording for user {user_id}")
        return existed

    def claim(self, user_id: UUID, recording_id: str) -> str:
        """
        Keeps the staged recording for a saved journal entry.

        Returns:
            str: URL of the kept recording.

        Raises:
            RecordingError: If `recording_id` is not the user's pending recording.
        """
        if os.path.basename(recording_id) != recording_id or self.pending_recording(user_id) != recording_id:
            raise RecordingError("No pending recording with that ID")
        source = os.path.join(self._pending_dir(user_id), recording_id)
        target = os.path.join(self._kept_dir(user_id), recording_id)
        shutil.move(source, target)
        return f"recordings/{user_id}/{recording_id}"

    def unclaim(self, user_id: UUID, recording_id: str) -> None:
        """Moves a claimed recording back to pending, used when the entry could not be saved."""
        source = os.path.join(self._kept_dir(user_id), recording_id)
        if os.path.isfile(source):
            pending = self._pending_dir(user_id)
            os.makedirs(pending, exist_ok=True)
            shutil.move(source, os.path.join(pending, recording_id))


@lru_cache(maxsize=None)
def get_recording_store() -> RecordingStore:
    return RecordingStore(AUDIO_STORAGE_DIR)
