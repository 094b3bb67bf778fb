"""
OutputWriter: Persist rendered prompts and the generated dataset.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

import pandas as pd

from .models import PersonEntry, RenderedPrompt

logger = logging.getLogger(__name__)


class OutputWriter:
    """Writes one UTF-8 text file per rendered prompt into a flat directory."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def prepare(self) -> Path:
        """Create the output directory if it does not exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir

    def write_prompt(self, prompt: RenderedPrompt) -> Path:
        path = self.output_dir / prompt.filename
        path.write_text(prompt.text, encoding="utf-8")
        logger.info("Successfully created: %s", path)
        return path

    def write_all(self, prompts: Iterable[RenderedPrompt]) -> List[Path]:
        """Write every prompt; a failed write is logged and skipped."""
        written: List[Path] = []
        for prompt in prompts:
            try:
                written.append(self.write_prompt(prompt))
            except OSError as e:
                logger.error("Error writing file %s: %s", self.output_dir / prompt.filename, e)
        return written

    def export_dataset(
        self,
        entries: Sequence[PersonEntry],
        filename: str = "dataset.csv",
    ) -> Path:
        """Write the generated entries as CSV, in dataset order."""
        path = self.output_dir / filename
        df = pd.DataFrame(
            [e.to_dict() for e in entries],
            columns=["name", "age", "city", "job_title"],
        )
        df.to_csv(path, index=False, encoding="utf-8")
        logger.info("Wrote %d records to %s", len(df), path)
        return path
