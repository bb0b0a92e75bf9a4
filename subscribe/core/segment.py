"""Segmenter selection by caption source kind.

WHY: Manual and automatic tracks need different algorithms. The choice is
made once, here, on the SubtitleSource enum rather than on free-form
strings scattered through the callers.

HOW: Exhaustive if/elif over the two SubtitleSource members. A value that
is not a member (a plain string, None) is rejected with SegmentError
instead of silently falling back to one algorithm.

RULES:
- SubtitleSource.MANUAL    → transform_manual
- SubtitleSource.AUTOMATIC → transform_automatic
- Anything else            → SegmentError
- Empty input is not an error: it yields an empty list
"""

from __future__ import annotations

from typing import List

from subscribe.core.automatic import transform_automatic
from subscribe.core.ir import Phrase, SubtitleSource
from subscribe.core.manual import transform_manual
from subscribe.core.raw import RawCaptions


class SegmentError(ValueError):
    """Raised when segmentation cannot run for the requested input."""


def segment(raw: RawCaptions, source: SubtitleSource) -> List[Phrase]:
    """Turn a decoded caption payload into phrases.

    Args:
        raw: Decoded json3 payload.
        source: Which kind of track the payload is.

    Returns:
        Phrases in chronological (input) order.

    Raises:
        SegmentError: source is not a SubtitleSource member.
    """
    if not isinstance(source, SubtitleSource):
        raise SegmentError("unsupported subtitle source: {!r}".format(source))
    if source is SubtitleSource.MANUAL:
        return transform_manual(raw)
    if source is SubtitleSource.AUTOMATIC:
        return transform_automatic(raw)
    raise SegmentError("unsupported subtitle source: {!r}".format(source))
