"""
Prompt template catalog.

Templates use `${Placeholder}` substitution. The built-in catalog covers plain
name retrieval, reverse lookups, positional and sequential queries, decoy
confirmation, and multi-attribute filters. A YAML file can replace it.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml

from .models import (
    AgeCityFilter,
    CityFilter,
    CombinedRequest,
    Confirmation,
    ConfigError,
    CountFilter,
    FixedCount,
    IndexPair,
    JobFilter,
    PromptTemplate,
    ReverseLookup,
    Selection,
    SelectionMode,
    SequentialRun,
)


DEFAULT_DECOY_NAME = "Slartibartfast"

DEFAULT_TEMPLATES: List[PromptTemplate] = [
    PromptTemplate(
        desc="01_standard_retrieval_10",
        selection=FixedCount(count=10),
        template="Here is the list:\n${DataBlock}\n\nFrom the list above, what are the ages for:\n${QueryItemsFormatted}",
    ),
    PromptTemplate(
        desc="02_different_phrasing_10",
        selection=FixedCount(count=10),
        template="See the following data:\n${DataBlock}\n\nUsing only this data, find the ages associated with these names: ${QueryItemsFormattedInline}.",
    ),
    PromptTemplate(
        desc="03_fewer_items_5",
        selection=FixedCount(count=5),
        template="Data:\n${DataBlock}\n\nProvide the ages for:\n${QueryItemsFormatted}",
    ),
    PromptTemplate(
        desc="04_more_items_15",
        selection=FixedCount(count=15),
        template="List:\n${DataBlock}\n\nPlease list the ages for the following 15 people:\n${QueryItemsFormatted}",
    ),
    PromptTemplate(
        desc="05_start_end_focus_2",
        selection=IndexPair(first=1, second=-2),
        template="Dataset:\n${DataBlock}\n\nWhat is the age of ${QueryName1} and the age of ${QueryName2} from this dataset?",
    ),
    PromptTemplate(
        desc="06_reverse_lookup_name",
        selection=ReverseLookup(count=2),
        template="Names and Ages:\n${DataBlock}\n\nBased on the list, which person has age ${QueryAge1}? And who has age ${QueryAge2}? (If ages are not unique, list all names found)",
    ),
    PromptTemplate(
        desc="07_combined_request",
        selection=CombinedRequest(count=3),
        template="Reference Data:\n${DataBlock}\n\nFind the age for ${QueryName1}. Also, find the age for ${QueryName2}. Finally, find the name associated with age ${QueryAge3}.",
    ),
    PromptTemplate(
        desc="08_sequential_names_5",
        selection=SequentialRun(length=5),
        template="Data Log:\n${DataBlock}\n\nWhat are the ages for ${QueryName1}, ${QueryName2}, ${QueryName3}, ${QueryName4}, and ${QueryName5}?",
    ),
    PromptTemplate(
        desc="09_widely_spaced_names_10",
        selection=FixedCount(count=10),
        template="People List:\n${DataBlock}\n\nExtract ages for: ${QueryItemsFormattedInline}.",
    ),
    PromptTemplate(
        desc="10_retrieval_confirmation",
        selection=Confirmation(count=8, decoy_name=DEFAULT_DECOY_NAME),
        template="Master List:\n${DataBlock}\n\nProvide ages for ${QueryItemsFormattedInline}. Also, confirm if '${NonExistentName}' is present in this list.",
    ),
    PromptTemplate(
        desc="11_filter_city_get_name_job",
        selection=CityFilter(),
        template="List Detail:\n${DataBlock}\n\nList the names and job titles of all people in the list who live in the city '${TargetCity}'.",
    ),
    PromptTemplate(
        desc="12_filter_job_get_name_age",
        selection=JobFilter(),
        template="Employee Data:\n${DataBlock}\n\nFind the names and ages of everyone listed with the job title '${TargetJobTitle}'.",
    ),
    PromptTemplate(
        desc="13_filter_age_city_get_name",
        selection=AgeCityFilter(window=5),
        template="Resident Information:\n${DataBlock}\n\nWho in the list is between ${MinAge} and ${MaxAge} years old AND lives in '${TargetCity}'? List their full names.",
    ),
    PromptTemplate(
        desc="14_count_job_city",
        selection=CountFilter(),
        template="Census Data:\n${DataBlock}\n\nHow many people in the list have the job title '${TargetJobTitle}' AND live in the city '${TargetCity}'? Provide only the count.",
    ),
    PromptTemplate(
        desc="15_filter_job_retrieve_all",
        selection=JobFilter(),
        template="Personnel Files:\n${DataBlock}\n\nProvide all available details (Name, Age, City, Job Title) for everyone whose job title is '${TargetJobTitle}'.",
    ),
]


def load_templates(templates_path: Path) -> List[PromptTemplate]:
    """
    Load prompt templates from YAML.

    Expected layout:

        prompt_templates:
          - desc: 01_standard_retrieval_10
            mode: fixed_count
            count: 10
            template: "Here is the list:\\n${DataBlock}..."
    """
    try:
        with open(templates_path, "r", encoding="utf-8") as f:
            spec = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read templates {templates_path}: {e}") from e

    entries = spec.get("prompt_templates", []) if isinstance(spec, dict) else []
    if not entries:
        raise ConfigError(f"No prompt_templates found in {templates_path}")

    templates = [_parse_template(data) for data in entries]

    descs = [t.desc for t in templates]
    duplicates = sorted({d for d in descs if descs.count(d) > 1})
    if duplicates:
        raise ConfigError(f"Duplicate template descriptions: {duplicates}")
    return templates


def _parse_template(data: Dict[str, Any]) -> PromptTemplate:
    """Parse one template entry from YAML data."""
    if not isinstance(data, dict):
        raise ConfigError(f"Template entry must be a mapping, got: {data!r}")
    for key in ("desc", "template", "mode"):
        if key not in data:
            raise ConfigError(f"Template entry is missing '{key}': {data!r}")

    try:
        mode = SelectionMode(data["mode"])
    except ValueError:
        valid = ", ".join(m.value for m in SelectionMode)
        raise ConfigError(f"Unknown selection mode '{data['mode']}'. Valid: {valid}")

    return PromptTemplate(
        desc=str(data["desc"]),
        template=str(data["template"]),
        selection=_parse_selection(mode, data),
    )


def _parse_selection(mode: SelectionMode, data: Dict[str, Any]) -> Selection:
    """Build the selection variant for a mode from its YAML fields."""
    try:
        if mode == SelectionMode.FIXED_COUNT:
            return FixedCount(count=int(data["count"]))
        if mode == SelectionMode.REVERSE_LOOKUP:
            return ReverseLookup(count=int(data.get("count", 2)))
        if mode == SelectionMode.COMBINED_REQUEST:
            return CombinedRequest(count=int(data.get("count", 3)))
        if mode == SelectionMode.CONFIRMATION:
            return Confirmation(
                count=int(data["count"]),
                decoy_name=str(data.get("decoy_name", DEFAULT_DECOY_NAME)),
            )
        if mode == SelectionMode.INDEX_PAIR:
            first, second = data["indices"]
            return IndexPair(first=int(first), second=int(second))
        if mode == SelectionMode.SEQUENTIAL_RUN:
            return SequentialRun(length=int(data.get("length", 5)))
        if mode == SelectionMode.AGE_CITY_FILTER:
            return AgeCityFilter(window=int(data.get("window", 5)))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid fields for mode '{mode.value}' in {data.get('desc')}: {e}") from e

    if mode == SelectionMode.CITY_FILTER:
        return CityFilter()
    if mode == SelectionMode.JOB_FILTER:
        return JobFilter()
    return CountFilter()
