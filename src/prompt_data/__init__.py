"""
Synthetic prompt dataset generation.

Fetches city names, generates unique fictitious people, and renders them into
prompt files for long-context retrieval testing.
"""

from .models import (
    PersonEntry,
    PromptTemplate,
    RenderedPrompt,
    SelectionMode,
    PromptDataError,
    NoCitiesAvailable,
    NoEntriesGenerated,
    EmptyCityPool,
    EmptyJobCatalog,
    TemplateRequirementError,
    TemplateRenderError,
    ConfigError,
)
from .config import GenerationConfig, JOB_TITLES, load_config
from .city_source import CitySource
from .entry_generator import EntryGenerator
from .sampler import sample_entries, sample_names
from .templates import DEFAULT_TEMPLATES, load_templates
from .renderer import PromptRenderer, format_data_block
from .writer import OutputWriter
from .pipeline import Pipeline, run_pipeline

__all__ = [
    # Models
    "PersonEntry",
    "PromptTemplate",
    "RenderedPrompt",
    "SelectionMode",
    # Errors
    "PromptDataError",
    "NoCitiesAvailable",
    "NoEntriesGenerated",
    "EmptyCityPool",
    "EmptyJobCatalog",
    "TemplateRequirementError",
    "TemplateRenderError",
    "ConfigError",
    # Config
    "GenerationConfig",
    "JOB_TITLES",
    "load_config",
    # Components
    "CitySource",
    "EntryGenerator",
    "sample_names",
    "sample_entries",
    "DEFAULT_TEMPLATES",
    "load_templates",
    "PromptRenderer",
    "format_data_block",
    "OutputWriter",
    # Pipeline
    "Pipeline",
    "run_pipeline",
]
