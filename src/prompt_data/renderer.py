"""
PromptRenderer: Expand prompt templates against a generated dataset.
"""

import logging
import random
from string import Template
from typing import Any, Dict, Iterable, List, Sequence

from .config import MAX_AGE, MIN_AGE
from .models import (
    AgeCityFilter,
    CityFilter,
    CombinedRequest,
    Confirmation,
    CountFilter,
    FIXED_COUNT_SELECTIONS,
    IndexPair,
    JobFilter,
    PersonEntry,
    PromptDataError,
    PromptTemplate,
    RenderedPrompt,
    ReverseLookup,
    SequentialRun,
    TemplateRenderError,
    TemplateRequirementError,
)
from .sampler import sample_entries, sample_names

logger = logging.getLogger(__name__)


def format_data_block(entries: Iterable[PersonEntry]) -> str:
    """Render entries as one `Name: ... | Age: ... | City: ... | Job Title: ...` line each."""
    return "\n".join(
        f"Name: {e.name} | Age: {e.age} | City: {e.city} | Job Title: {e.job_title}"
        for e in entries
    )


class PromptRenderer:
    """Fills template placeholders from the dataset and sampled query values."""

    def __init__(
        self,
        entries: Sequence[PersonEntry],
        rng: random.Random,
        min_age: int = MIN_AGE,
        max_age: int = MAX_AGE,
    ):
        self.entries = list(entries)
        self.rng = rng
        self.min_age = min_age
        self.max_age = max_age
        self.names = [e.name for e in self.entries]
        self.data_block = format_data_block(self.entries)

    def render_all(self, templates: Iterable[PromptTemplate]) -> List[RenderedPrompt]:
        """Render every template, skipping those that fail with a warning."""
        rendered: List[RenderedPrompt] = []
        for template in templates:
            try:
                rendered.append(self.render(template))
            except PromptDataError as e:
                logger.warning("Skipping template %s: %s", template.desc, e)
        return rendered

    def render(self, template: PromptTemplate) -> RenderedPrompt:
        """Render a single template."""
        context = self.build_context(template)
        try:
            text = Template(template.template).substitute(context)
        except KeyError as e:
            raise TemplateRenderError(
                f"template {template.desc} references unknown placeholder {e}"
            ) from e
        except ValueError as e:
            raise TemplateRenderError(f"template {template.desc} is malformed: {e}") from e
        return RenderedPrompt(desc=template.desc, text=text)

    def build_context(self, template: PromptTemplate) -> Dict[str, Any]:
        """
        Select the placeholder values for a template.

        Raises:
            TemplateRequirementError: If the dataset cannot satisfy the selection
        """
        selection = template.selection
        context: Dict[str, Any] = {"DataBlock": self.data_block}

        if isinstance(selection, FIXED_COUNT_SELECTIONS):
            context.update(self._fixed_count_values(template.desc, selection))
        elif isinstance(selection, IndexPair):
            context.update(self._index_pair_values(template.desc, selection))
        elif isinstance(selection, SequentialRun):
            context.update(self._sequential_values(template.desc, selection))
        else:
            if not self.entries:
                raise TemplateRequirementError(f"no data for filter query in {template.desc}")
            context.update(self._filter_values(selection))

        return context

    def _fixed_count_values(self, desc: str, selection) -> Dict[str, Any]:
        if len(self.entries) < selection.min_entries:
            raise TemplateRequirementError(
                f"not enough data ({len(self.entries)}) for query type in {desc} "
                f"(needs {selection.min_entries})"
            )

        selected = sample_names(self.names, selection.count, self.rng)
        values: Dict[str, Any] = {
            "QueryItemsFormatted": "- " + "\n- ".join(selected),
            "QueryItemsFormattedInline": ", ".join(selected),
        }

        if isinstance(selection, ReverseLookup):
            first, second = sample_entries(self.entries, 2, self.rng)
            values["QueryAge1"] = first.age
            values["QueryAge2"] = second.age
        elif isinstance(selection, CombinedRequest):
            first, second, third = sample_entries(self.entries, 3, self.rng)
            values["QueryName1"] = first.name
            values["QueryName2"] = second.name
            values["QueryAge3"] = third.age
        elif isinstance(selection, Confirmation):
            values["NonExistentName"] = selection.decoy_name

        return values

    def _index_pair_values(self, desc: str, selection: IndexPair) -> Dict[str, Any]:
        first = self._resolve_index(selection.first)
        second = self._resolve_index(selection.second)
        if first < 0 or second < 0:
            raise TemplateRequirementError(f"invalid query indices for {desc}")
        return {
            "QueryName1": self.entries[first].name,
            "QueryName2": self.entries[second].name,
        }

    def _resolve_index(self, index: int) -> int:
        """Count negative positions from the end; clamp overruns to the last entry."""
        if index < 0:
            index += len(self.entries)
        return min(index, len(self.entries) - 1)

    def _sequential_values(self, desc: str, selection: SequentialRun) -> Dict[str, Any]:
        if len(self.entries) < selection.length:
            raise TemplateRequirementError(
                f"not enough data ({len(self.entries)}) for sequential query in {desc}"
            )
        start = self.rng.randint(0, len(self.entries) - selection.length)
        return {
            f"QueryName{i + 1}": self.entries[start + i].name
            for i in range(selection.length)
        }

    def _filter_values(self, selection) -> Dict[str, Any]:
        if isinstance(selection, CityFilter):
            return {"TargetCity": self._random_entry().city}
        if isinstance(selection, JobFilter):
            return {"TargetJobTitle": self._random_entry().job_title}
        if isinstance(selection, AgeCityFilter):
            city = self._random_entry().city
            min_age, max_age = self._age_window(self._random_entry().age, selection.window)
            return {"TargetCity": city, "MinAge": str(min_age), "MaxAge": str(max_age)}
        if isinstance(selection, CountFilter):
            return {
                "TargetJobTitle": self._random_entry().job_title,
                "TargetCity": self._random_entry().city,
            }
        raise TemplateRenderError(f"unsupported selection {selection!r}")

    def _age_window(self, mid_age: int, window: int):
        low = max(mid_age - window, self.min_age)
        high = min(mid_age + window, self.max_age)
        if low > high:
            low = high
        return low, high

    def _random_entry(self) -> PersonEntry:
        return self.entries[self.rng.randrange(len(self.entries))]
