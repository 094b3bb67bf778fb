"""
Pipeline: Wire city fetching, entry generation, rendering and output.
"""

import argparse
import logging
import random
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .city_source import CitySource
from .config import GenerationConfig, load_config
from .entry_generator import EntryGenerator
from .models import (
    ConfigError,
    FetchResult,
    NoCitiesAvailable,
    NoEntriesGenerated,
    PromptDataError,
    PromptTemplate,
)
from .renderer import PromptRenderer
from .templates import DEFAULT_TEMPLATES, load_templates
from .writer import OutputWriter

logger = logging.getLogger(__name__)


class Pipeline:
    """Main pipeline for prompt dataset generation."""

    def __init__(
        self,
        config: GenerationConfig,
        city_source: Optional[CitySource] = None,
        name_provider: Optional[Callable[[], str]] = None,
        templates: Optional[Sequence[PromptTemplate]] = None,
    ):
        self.config = config
        self.seed = config.random_seed if config.random_seed is not None else time.time_ns()
        self.rng = random.Random(self.seed)

        self.city_source = city_source
        self.entry_generator = EntryGenerator(
            rng=self.rng,
            name_provider=name_provider,
            min_age=config.min_age,
            max_age=config.max_age,
        )
        self.writer = OutputWriter(config.output_dir)

        if templates is not None:
            self.templates = list(templates)
        elif config.templates_path:
            self.templates = load_templates(Path(config.templates_path))
        else:
            self.templates = list(DEFAULT_TEMPLATES)

    def run(self) -> Dict[str, Any]:
        """
        Run the full pipeline and return run statistics.

        Raises:
            NoCitiesAvailable: If no city could be fetched
            NoEntriesGenerated: If generation produced zero entries
        """
        cfg = self.config
        logger.info("Random seed: %s", self.seed)

        fetch = self._fetch_cities()
        cities = fetch.cities

        generation = self.entry_generator.generate_with_stats(cfg.num_entries, cities)
        if not generation.entries:
            raise NoEntriesGenerated("no person data was generated successfully")
        entries = generation.entries

        renderer = PromptRenderer(
            entries,
            rng=self.rng,
            min_age=cfg.min_age,
            max_age=cfg.max_age,
        )

        output_dir = self.writer.prepare()
        logger.info("Generating prompt files in directory: '%s'", output_dir)
        prompts = renderer.render_all(self.templates)
        written = self.writer.write_all(prompts)

        dataset_path = None
        if cfg.export_dataset:
            dataset_path = self.writer.export_dataset(entries)

        logger.info("Generated %d prompt files.", len(written))

        return {
            "seed": self.seed,
            "cities_fetched": len(cities),
            "city_attempts": fetch.attempts,
            "entries_generated": len(entries),
            "entry_attempts": generation.attempts,
            "prompts_rendered": len(prompts),
            "prompts_written": len(written),
            "prompts_skipped": len(self.templates) - len(prompts),
            "output_dir": str(output_dir),
            "dataset_path": str(dataset_path) if dataset_path else None,
        }

    def _fetch_cities(self) -> FetchResult:
        cfg = self.config
        if self.city_source is not None:
            return self._fetch_with(self.city_source)

        with CitySource(
            url=cfg.city_api_url,
            timeout=cfg.request_timeout,
            request_delay=cfg.api_request_delay,
        ) as source:
            return self._fetch_with(source)

    def _fetch_with(self, source: CitySource) -> FetchResult:
        cfg = self.config
        fetch = source.fetch(cfg.num_cities_to_fetch, cfg.target_unique_cities)
        if not fetch.cities:
            raise NoCitiesAvailable(
                f"failed to fetch any valid cities after {fetch.attempts} attempts"
            )
        return fetch


def run_pipeline(
    config_path: Optional[str] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """Convenience function to run the full pipeline."""
    config = load_config(Path(config_path) if config_path else None)
    config = config.with_overrides(**overrides)
    config.validate()
    return Pipeline(config).run()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate synthetic people data and render it into prompt files."
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="YAML config file with generation settings",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default=None,
        help="Output directory for prompt files",
    )
    parser.add_argument(
        "--num-entries", "-n",
        type=int,
        default=None,
        help="Number of person entries to generate (default: 5000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed (default: time-based)",
    )
    parser.add_argument(
        "--templates",
        default=None,
        help="YAML file replacing the built-in prompt templates",
    )
    parser.add_argument(
        "--export-dataset",
        action="store_true",
        default=None,
        help="Also write the generated dataset as dataset.csv",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only log warnings and errors")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        config = load_config(args.config).with_overrides(
            output_dir=args.output_dir,
            num_entries=args.num_entries,
            random_seed=args.seed,
            templates_path=args.templates,
            export_dataset=args.export_dataset,
        )
        config.validate()
        pipeline = Pipeline(config)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    try:
        stats = pipeline.run()
    except (PromptDataError, OSError) as e:
        logger.error("Critical error: %s. Exiting.", e)
        return 1

    logger.info(
        "Finished. Generated %d prompt files in '%s' (%d skipped).",
        stats["prompts_written"],
        stats["output_dir"],
        stats["prompts_skipped"],
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
