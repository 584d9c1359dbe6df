"""
Engagement score - read-rate summary of a company's messages.

The score maps the ratio read/sent onto [-1, 1] by three linear bands:

    ratio >= 0.8   ->  0.1 .. 1.0
    ratio >= 0.5   -> -0.1 .. 0.1
    otherwise      -> -1.0 .. -0.6

Bands join without a downward step, so the score never decreases as more
messages are read.
"""
from typing import Dict

HIGH_BAND = 0.8
MEDIUM_BAND = 0.5

# Label thresholds for dashboard display
POSITIVE_THRESHOLD = 0.05
NEGATIVE_THRESHOLD = -0.05


def _ratio(sent: int, read: int) -> float:
    read = min(max(read, 0), sent)
    return read / sent


def score(sent: int, read: int) -> float:
    """
    Engagement score for `sent` messages of which `read` were read.

    Returns 0.0 when nothing was sent.
    """
    if not sent or sent <= 0:
        return 0.0

    ratio = _ratio(sent, read)
    if ratio >= HIGH_BAND:
        value = 0.1 + (ratio - HIGH_BAND) * 4.5
    elif ratio >= MEDIUM_BAND:
        value = -0.1 + (ratio - MEDIUM_BAND) * (0.2 / (HIGH_BAND - MEDIUM_BAND))
    else:
        value = (ratio / MEDIUM_BAND) * 0.4 - 1.0

    return max(-1.0, min(1.0, value))


def engagement_band(sent: int, read: int) -> str:
    """'high', 'medium', 'low', or 'none' when nothing was sent."""
    if not sent or sent <= 0:
        return "none"
    ratio = _ratio(sent, read)
    if ratio >= HIGH_BAND:
        return "high"
    if ratio >= MEDIUM_BAND:
        return "medium"
    return "low"


def read_rate(sent: int, read: int) -> int:
    """Read rate as a rounded percentage."""
    if not sent or sent <= 0:
        return 0
    return round(_ratio(sent, read) * 100)


def sentiment_label(value: float) -> str:
    if value > POSITIVE_THRESHOLD:
        return "positive"
    if value < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


def summarize(sent: int, read: int) -> Dict[str, object]:
    """All engagement figures for one company."""
    value = score(sent, read)
    return {
        "sentiment_score": round(value, 2),
        "sentiment_label": sentiment_label(value),
        "engagement_band": engagement_band(sent, read),
        "read_rate": read_rate(sent, read),
    }
