"""Resolution of image and video references to absolute URLs.

Media lives in an object storage bucket on its own origin. The backend
hands out either an absolute URL or a bare object key; both are turned
into something a player or image view can load.
"""

from typing import Literal
from urllib.parse import urlsplit, urlunsplit

from learnwithme.config.settings import Settings


COURSE_IMAGES_FOLDER = "course-images"
PROFILE_IMAGES_FOLDER = "profile-images"
COURSE_VIDEOS_FOLDER = "course-videos"

_LOCAL_HOSTNAME = "localhost"


def rewrite_localhost(url: str, backend_host: str | None) -> str:
    """Point an absolute URL reporting ``localhost`` at the backend host.

    Examples:
        >>> rewrite_localhost("http://localhost:9000/b/k.png", "10.0.0.5")
        'http://10.0.0.5:9000/b/k.png'
    """
    if not backend_host:
        return url

    parts = urlsplit(url)
    if parts.hostname != _LOCAL_HOSTNAME:
        return url

    netloc = backend_host
    if parts.port is not None:
        netloc = f"{backend_host}:{parts.port}"
    if parts.username:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit(parts._replace(netloc=netloc))


def _is_absolute(url: str) -> bool:
    return url.startswith(("http://", "https://"))


def _object_url(settings: Settings, folder: str, name: str) -> str:
    base = settings.media_base_url.rstrip("/")
    return f"{base}/{settings.media_bucket}/{folder}/{name.lstrip('/')}"


def resolve_media_url(
    settings: Settings,
    folder: str,
    url: str | None = None,
    key: str | None = None,
) -> str | None:
    """Resolve a media reference.

    An absolute URL wins (after localhost rewriting); otherwise the key,
    then a bare url, is placed under ``{base}/{bucket}/{folder}/``.
    """
    if url and _is_absolute(url):
        return rewrite_localhost(url, settings.backend_host)
    if key:
        return _object_url(settings, folder, key)
    if url:
        return _object_url(settings, folder, url)
    return None


def resolve_image_url(
    settings: Settings,
    url: str | None = None,
    key: str | None = None,
    kind: Literal["course", "profile"] = "course",
) -> str | None:
    folder = PROFILE_IMAGES_FOLDER if kind == "profile" else COURSE_IMAGES_FOLDER
    return resolve_media_url(settings, folder, url, key)


def resolve_video_url(
    settings: Settings,
    url: str | None = None,
    key: str | None = None,
) -> str | None:
    return resolve_media_url(settings, COURSE_VIDEOS_FOLDER, url, key)
