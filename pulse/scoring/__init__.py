"""Article importance scoring."""

from pulse.scoring.decay import timeDecay
from pulse.scoring.scorer import scoreArticle

__all__ = ["scoreArticle", "timeDecay"]
