from abc import ABC, abstractmethod


class ShareError(RuntimeError):
    """The social network or link shortener rejected a request."""


class BaseSocialClient(ABC):
    """
    Abstract interface for announcing new episodes.

    Implementations provide link shortening, image download and posting a
    status with a picture.
    """

    @abstractmethod
    def shorten(self, url: str) -> str:
        """
        Shorten a deep link.

        Returns:
            str: The short URL.

        Raises:
            ShareError: If the shortener answers without a short URL.
        """

    @abstractmethod
    def fetch_image(self, url: str) -> bytes:
        """Download the thumbnail to attach to the post."""

    @abstractmethod
    def publish(self, text: str, image: bytes) -> bool:
        """
        Post a status with an attached picture.

        Returns:
            bool: True when the post was accepted.
        """
