"""JSON writer for validation verdicts."""

import json
from decimal import Decimal
from pathlib import Path
from typing import Optional

from movement_reconciler.config import Config
from movement_reconciler.models.finding import Verdict
from movement_reconciler.utils.decimal_utils import decimal_to_number
from movement_reconciler.utils.logging_config import get_logger

logger = get_logger(__name__)


def json_default(value: object) -> object:
    """Encode Decimal amounts as JSON numbers for json.dump(default=...)."""
    if isinstance(value, Decimal):
        return decimal_to_number(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JSONWriter:
    """Writes the response document for a verdict."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize JSON writer.

        Args:
            config: Application configuration.
        """
        self.config = config or Config()

    def render(self, verdict: Verdict, group_by_kind: Optional[bool] = None) -> str:
        """Serialize a verdict.

        Args:
            verdict: Verdict to render.
            group_by_kind: Override config.validation.group_reasons.

        Returns:
            JSON text.
        """
        if group_by_kind is None:
            group_by_kind = self.config.validation.group_reasons
        document = verdict.to_dict(group_by_kind=group_by_kind)
        return json.dumps(
            document,
            indent=self.config.output.indent or None,
            ensure_ascii=False,
            default=json_default,
        )

    def write(
        self, path: Path, verdict: Verdict, group_by_kind: Optional[bool] = None
    ) -> Path:
        """Write a verdict to a file, creating parent directories.

        Args:
            path: Output file path.
            verdict: Verdict to write.
            group_by_kind: Override config.validation.group_reasons.

        Returns:
            The written path.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render(verdict, group_by_kind))
            f.write("\n")
        logger.info(f"Wrote verdict to {path}")
        return path
