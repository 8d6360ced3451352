"""
Workers AI image gateway.
Optional prompt translation, then text-to-image on a randomly picked Cloudflare account.
"""

from image_gateway.main import create_app

__all__ = ["create_app"]
