from .urls import resolve_image_url, resolve_media_url, resolve_video_url, rewrite_localhost


__all__ = [
    "resolve_image_url",
    "resolve_media_url",
    "resolve_video_url",
    "rewrite_localhost",
]
