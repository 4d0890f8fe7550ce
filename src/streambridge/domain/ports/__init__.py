from .media_server import MediaServerPort

__all__ = [
    "MediaServerPort",
]
