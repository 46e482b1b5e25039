"""
Weibo client for short links and picture posts.

Uses the public Weibo open API with an access token:
    GET  /2/short_url/shorten.json   url_long -> urls[0].url_short
    POST /2/statuses/share.json      status + pic (multipart)
"""

import logging
from typing import Optional

import requests

from .base import BaseSocialClient, ShareError
from vodsync.logger import setup_logging

setup_logging(logger_name="share")

API_BASE = "https://api.weibo.com/2"
REQUEST_TIMEOUT = 60


class WeiboClient(BaseSocialClient):
    """A client for the Weibo open API."""

    def __init__(
        self,
        access_token: str,
        api_base: str = API_BASE,
        session: Optional[requests.Session] = None,
    ):
        if not access_token:
            raise ValueError("Weibo client needs an access token")
        self.access_token = access_token
        self.api_base = api_base.rstrip("/")
        self.session = session or requests.Session()

    def shorten(self, url: str) -> str:
        response = self.session.get(
            f"{self.api_base}/short_url/shorten.json",
            params={"access_token": self.access_token, "url_long": url},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        body = response.json()
        urls = body.get("urls") or []
        if not urls or not urls[0].get("url_short"):
            raise ShareError(f"Cannot shorten {url}: {body}")
        return urls[0]["url_short"]

    def fetch_image(self, url: str) -> bytes:
        response = self.session.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.content

    def publish(self, text: str, image: bytes) -> bool:
        logger = logging.getLogger("share")
        response = self.session.post(
            f"{self.api_base}/statuses/share.json",
            data={"access_token": self.access_token, "status": text},
            files={"pic": ("cover.jpg", image, "image/jpeg")},
            timeout=REQUEST_TIMEOUT,
        )
        if not response.ok:
            logger.error(f"Weibo rejected post ({response.status_code}): {response.text}")
            return False
        body = response.json()
        if "error_code" in body:
            logger.error(f"Weibo rejected post: {body.get('error_code')} {body.get('error')}")
            return False
        return True
