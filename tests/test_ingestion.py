"""Tests for submission validation and media routing."""

from __future__ import annotations

import asyncio

import pytest

from app.pipelines.intake import MediaPart, UploadSubmission, classify_part, receive, resolve_content_type
from app.utils.errors import UnsupportedMediaError, ValidationError

from conftest import stored_files


def _voice(data: bytes = b"voice-bytes") -> MediaPart:
    return MediaPart("voice", data, "audio/webm;codecs=opus", "emergency_audio.webm")


def test_missing_voice_is_rejected_without_writes(media_storage):
    submission = UploadSubmission(parts=(MediaPart("video", b"video", "video/webm"),))

    with pytest.raises(ValidationError):
        asyncio.run(receive(submission, media_storage))

    assert stored_files(media_storage) == []


def test_empty_voice_is_rejected(media_storage):
    with pytest.raises(ValidationError):
        asyncio.run(receive(UploadSubmission(parts=(_voice(b""),)), media_storage))

    assert stored_files(media_storage) == []


def test_voice_and_video_are_routed_to_their_directories(media_storage):
    submission = UploadSubmission(
        parts=(_voice(), MediaPart("video", b"video-bytes", "video/mp4")),
    )

    stored = asyncio.run(receive(submission, media_storage))

    assert stored.voice_path.startswith("audio/")
    assert stored.voice_path.endswith(".webm")
    assert stored.video_path.startswith("video/")
    assert stored.video_path.endswith(".mp4")
    assert media_storage.absolute_path(stored.voice_path).read_bytes() == b"voice-bytes"
    assert stored.rejected == ()


def test_unknown_field_is_skipped_when_voice_present(media_storage):
    submission = UploadSubmission(
        parts=(MediaPart("photo", b"jpeg", "image/jpeg"), _voice()),
    )

    stored = asyncio.run(receive(submission, media_storage))

    assert stored.rejected == ("photo",)
    assert stored.video_path is None
    assert len(stored_files(media_storage)) == 1


def test_unknown_field_without_voice_still_fails_validation(media_storage):
    submission = UploadSubmission(parts=(MediaPart("photo", b"jpeg", "image/jpeg"),))

    with pytest.raises(ValidationError):
        asyncio.run(receive(submission, media_storage))


def test_classify_part_rejects_unknown_fields(media_storage):
    assert classify_part("voice", media_storage) == "audio"
    assert classify_part("video", media_storage) == "video"
    with pytest.raises(UnsupportedMediaError):
        classify_part("attachment", media_storage)


def test_resolve_content_type_guesses_from_filename():
    assert resolve_content_type("audio/webm;codecs=opus", "a.webm") == "audio/webm;codecs=opus"
    assert resolve_content_type(None, "call.mp3") == "audio/mpeg"
    assert resolve_content_type("application/octet-stream", "call.mp3") == "audio/mpeg"
    assert resolve_content_type(None, None) is None
