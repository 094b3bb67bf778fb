"""
EntryGenerator: Generate unique synthetic person entries.
"""

import logging
import random
from typing import Callable, List, Optional, Sequence

from faker import Faker

from .config import JOB_TITLES, MAX_AGE, MIN_AGE
from .models import EmptyCityPool, EmptyJobCatalog, GenerationResult, PersonEntry

logger = logging.getLogger(__name__)

# Attempt ceiling per requested entry
ATTEMPTS_PER_ENTRY = 5


def faker_name_provider(rng: random.Random, locale: Optional[str] = None) -> Callable[[], str]:
    """Build a name provider backed by a Faker instance seeded from rng."""
    fake = Faker(locale)
    fake.seed_instance(rng.getrandbits(32))

    def provide() -> str:
        return f"{fake.first_name()} {fake.last_name()}"

    return provide


class EntryGenerator:
    """Factory for unique person entries drawn from a city pool and job catalog."""

    def __init__(
        self,
        rng: random.Random,
        name_provider: Optional[Callable[[], str]] = None,
        job_titles: Sequence[str] = JOB_TITLES,
        min_age: int = MIN_AGE,
        max_age: int = MAX_AGE,
    ):
        self.rng = rng
        self.name_provider = name_provider or faker_name_provider(rng)
        self.job_titles = list(job_titles)
        self.min_age = min_age
        self.max_age = max_age

    def generate(self, count: int, city_pool: Sequence[str]) -> List[PersonEntry]:
        """Generate up to `count` entries with unique names."""
        return self.generate_with_stats(count, city_pool).entries

    def generate_with_stats(self, count: int, city_pool: Sequence[str]) -> GenerationResult:
        """
        Generate entries and report how many attempts were used.

        The loop stops at `count` entries or `count * 5` attempts. Running out
        of attempts is logged, not raised; the caller decides whether a short
        (or empty) result is acceptable.

        Raises:
            EmptyCityPool: If city_pool is empty
            EmptyJobCatalog: If the job catalog is empty
        """
        if not city_pool:
            raise EmptyCityPool("cannot generate data without any available cities")
        if not self.job_titles:
            raise EmptyJobCatalog("predefined job titles list is empty")

        logger.info("Generating %d random unique person entries...", count)
        cities = list(city_pool)
        result = GenerationResult()
        used_names = set()
        max_attempts = count * ATTEMPTS_PER_ENTRY

        while len(result.entries) < count and result.attempts < max_attempts:
            result.attempts += 1

            name = self._candidate_name()
            if name is None or name in used_names:
                continue

            used_names.add(name)
            result.entries.append(
                PersonEntry(
                    name=name,
                    age=self.rng.randint(self.min_age, self.max_age),
                    city=self.rng.choice(cities),
                    job_title=self.rng.choice(self.job_titles),
                )
            )

        if len(result.entries) < count:
            logger.warning(
                "Could only generate %d unique names after %d attempts.",
                len(result.entries),
                result.attempts,
            )

        self.rng.shuffle(result.entries)
        logger.info("Data generation complete (%d unique entries generated).", len(result.entries))
        return result

    def _candidate_name(self) -> Optional[str]:
        """Ask the name provider for a candidate; None if it failed."""
        try:
            name = self.name_provider()
            name = name.strip() if name else ""
        except Exception as e:
            logger.warning("Error generating name: %s. Skipping entry.", e)
            return None
        return name or None
