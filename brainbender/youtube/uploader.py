"""
brainbender/youtube/uploader.py – YouTube publisher
====================================================
Uploads a finished Short through the YouTube Data API v3 resumable upload.
Uploads are never public: privacy is ``private`` or ``unlisted``. A failed
upload is reported once; nothing here retries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload
from loguru import logger

from brainbender.errors import PublishError
from brainbender.riddles import Riddle
from brainbender.youtube.auth import YouTubeCredentials

CHUNK_SIZE = 8 * 1024 * 1024
YT_DEFAULT_LANGUAGE = "en"
TITLE_LIMIT = 100
DESCRIPTION_LIMIT = 4900

BASE_TAGS = ["riddle", "riddles", "brain teaser", "puzzle", "shorts", "daily riddle", "can you solve it"]
HASHTAGS = "#Shorts #Riddle #BrainTeaser #Puzzle"


def build_metadata(riddle: Riddle, channel_title: str) -> dict[str, Any]:
    title = riddle.question
    if "#shorts" not in title.lower():
        suffix = " #Shorts"
        title = title[: TITLE_LIMIT - len(suffix)].rstrip() + suffix
    description = (
        f"{riddle.question}\n\n"
        f"Answer: {riddle.answer}\n\n"
        f"New riddle every day on {channel_title}.\n\n"
        f"{HASHTAGS}"
    )
    return {
        "title": title[:TITLE_LIMIT],
        "description": description[:DESCRIPTION_LIMIT],
        "tags": list(BASE_TAGS),
    }


class YouTubePublisher:

    def __init__(
        self,
        credentials: YouTubeCredentials,
        category_id: str = "27",
        privacy_status: str = "private",
    ) -> None:
        if privacy_status not in {"private", "unlisted"}:
            raise ValueError(f"Refusing non-private upload privacy: {privacy_status}")
        self._credentials = credentials
        self._category_id = category_id
        self._privacy = privacy_status

    def _service(self):
        return build("youtube", "v3", credentials=self._credentials.current(), cache_discovery=False)

    def upload(self, video_path: Path, title: str, description: str, tags: list[str]) -> str:
        if not video_path.exists():
            raise PublishError(f"Video file not found: {video_path}")

        body = {
            "snippet": {
                "title": title[:TITLE_LIMIT],
                "description": description[:DESCRIPTION_LIMIT],
                "tags": tags,
                "categoryId": self._category_id,
                "defaultLanguage": YT_DEFAULT_LANGUAGE,
                "defaultAudioLanguage": YT_DEFAULT_LANGUAGE,
            },
            "status": {
                "privacyStatus": self._privacy,
                "selfDeclaredMadeForKids": False,
            },
        }
        media = MediaFileUpload(str(video_path), mimetype="video/mp4", chunksize=CHUNK_SIZE, resumable=True)

        logger.info(f"[Uploader] Starting upload: '{title[:60]}' | privacy={self._privacy}")
        try:
            request = self._service().videos().insert(part="snippet,status", body=body, media_body=media)
            response = None
            while response is None:
                status, response = request.next_chunk()
                if status:
                    logger.debug(f"[Uploader] Upload progress: {int(status.progress() * 100)}%")
        except HttpError as e:
            raise PublishError(f"YouTube rejected the upload: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise PublishError(f"Upload failed: {e}") from e

        video_id = str(response.get("id") or "")
        if not video_id:
            raise PublishError(f"No video id in upload response: {response}")
        logger.success(f"[Uploader] Upload complete → https://youtu.be/{video_id}")
        return video_id
