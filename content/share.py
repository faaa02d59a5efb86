"""
Social share links for blog posts.
"""

from __future__ import annotations

from urllib.parse import urlencode

SHARE_URLS = {
    "twitter": "https://twitter.com/intent/tweet",
    "facebook": "https://www.facebook.com/sharer/sharer.php",
    "linkedin": "https://www.linkedin.com/sharing/share-offsite/",
    "whatsapp": "https://api.whatsapp.com/send",
}

SHARE_PLATFORMS = ("copy", *SHARE_URLS)


def build_share_url(platform: str, url: str, text: str = "") -> str:
    if platform == "copy":
        return url
    if platform not in SHARE_URLS:
        raise ValueError(f"Unsupported share platform: {platform}")

    if platform == "twitter":
        params = {"text": text, "url": url}
    elif platform == "facebook":
        params = {"u": url}
    elif platform == "linkedin":
        params = {"url": url, "title": text}
    else:
        # WhatsApp only takes a single text body.
        params = {"text": f"{text}\n\n{url}" if text else url}
    return f"{SHARE_URLS[platform]}?{urlencode(params)}"
