"""HTTP download package — async interface for caption and metadata URLs.

WHY: Caption payloads are usually fetched from signed YouTube URLs. This
package keeps all network access out of the pure core.

HOW: Uses httpx.AsyncClient behind the CaptionFetcher class.

RULES:
- All HTTP calls go through CaptionFetcher (no direct httpx usage elsewhere)
- Every download has a timeout and a size cap
"""

from subscribe.api.client import CaptionFetcher, FetchError, ResponseTooLargeError

__all__ = ["CaptionFetcher", "FetchError", "ResponseTooLargeError"]
