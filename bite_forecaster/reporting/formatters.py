"""
ASCII terminal formatters for CLI commands.

All formatters take model outputs and return plain multi-line strings
suitable for ``typer.echo()``.  No third-party dependencies.
"""

from __future__ import annotations

from bite_forecaster.models.prediction import FeatureImportance, ModelStats, PredictionResult
from bite_forecaster.ml.trainer import TrainingSummary
from bite_forecaster.utils.moon import moon_phase_name

_RULE = "-" * 48


def format_prediction(result: PredictionResult, moon_phase: float | None = None) -> str:
    """Render a detailed prediction as a small report."""
    lines = [
        f"  Bite probability: {result.probability:.1%}  [{result.recommendation.value}]",
        f"  Confidence:       {result.confidence:.0%}",
        f"  Best time:        {result.best_time}",
    ]
    if moon_phase is not None:
        lines.append(f"  Moon:             {moon_phase_name(moon_phase)} ({moon_phase:.2f})")
    lines.append("")
    lines.append(f"  {'Factor':<16}{'Score':>7}  Impact")
    lines.append(f"  {_RULE}")
    for factor in result.factors:
        lines.append(f"  {factor.name:<16}{factor.score:>7.2f}  {factor.impact}")
    return "\n".join(lines)


def format_stats(stats: ModelStats) -> str:
    return "\n".join([
        f"  Samples:          {stats.n_samples}",
        f"  Iterations:       {stats.n_iterations}",
        f"  Learning rate:    {stats.learning_rate:g}",
        f"  Avg prediction:   {stats.avg_prediction:.3f}",
    ])


def format_training_summary(summary: TrainingSummary | None) -> str:
    if summary is None:
        return "  No samples; training skipped."
    return (
        f"  Trained on {summary.n_samples} samples x {summary.n_iterations} iterations"
        f"  (MAE {summary.mae_before:.4f} -> {summary.mae_after:.4f})"
    )


def format_feature_importance(importance: FeatureImportance) -> str:
    """Factor shares sorted from largest to smallest, with a bar per row."""
    rows = sorted(importance.model_dump().items(), key=lambda kv: kv[1], reverse=True)
    lines = [f"  {'Factor':<16}{'Share':>7}", f"  {_RULE}"]
    for name, share in rows:
        bar = "#" * max(0, int(round(share * 40)))
        lines.append(f"  {name:<16}{share:>7.1%}  {bar}")
    return "\n".join(lines)
