from collections.abc import Callable, Sequence

from sourcelens.ingestion.extractors import BaseExtractor
from sourcelens.ingestion.models import ExtractionAttempt, ExtractionContext
from sourcelens.logging.logger import Log


def first_acceptable(
    extractors: Sequence[BaseExtractor],
    context: ExtractionContext,
    is_acceptable: Callable[[ExtractionAttempt], bool],
    best: ExtractionAttempt | None = None,
) -> ExtractionAttempt | None:
    """Run ``extractors`` in order until one produces an acceptable attempt.

    Every attempt is recorded on ``context``. The longest succeeded attempt
    seen so far (starting from ``best``) is returned, whether or not any
    attempt was acceptable.
    """
    for extractor in extractors:
        attempt = extractor.attempt(context)
        context.attempts.append(attempt)
        if not attempt.succeeded:
            Log.info(f"Attempt {attempt.label} failed: {attempt.error}")
            continue
        Log.info(f"Attempt {attempt.label} succeeded with {len(attempt.content)} chars")
        if best is None or len(attempt.content) > len(best.content):
            best = attempt
        if is_acceptable(attempt):
            break
    return best
