"""Volume Criteria - latest bar volume spike."""

from marketscout.services.scanner.base import CriterionDetector, EvaluationContext
from marketscout.services.scanner.registry import CriterionRegistry

SPIKE_MULTIPLIER = 1.5


@CriterionRegistry.register
class VolumeSpikeCriterion(CriterionDetector):
    """Latest volume above 1.5x the 20-bar average."""

    criterion_id = "volume"
    display_name = "Volume Spike"
    icon = "📊"
    group = "volume"
    weight = 15
    priority = 50

    def check(self, ctx: EvaluationContext) -> bool:
        if ctx.hist.empty:
            return False
        latest_volume = float(ctx.hist['volume'].iloc[-1])
        return latest_volume > SPIKE_MULTIPLIER * ctx.volume_avg
