"""Brain contracts shared with the host orchestration framework.

Three kinds of brains are supplied by this package:

- atoms: stateless inference, one request in, one structured output back
- repls: agentic ask (read-only) and act (read+write) over a repository
- hooks adapters: persistence of role hooks into a brain's own config file
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, timedelta
from enum import Enum
from pathlib import Path
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

TOutput = TypeVar("TOutput", bound=BaseModel)


class BrainHookEvent(str, Enum):
    """Lifecycle moments a hook can be attached to."""

    ON_BOOT = "onBoot"
    ON_TOOL = "onTool"
    ON_STOP = "onStop"


class BrainHookFilter(BaseModel):
    """Secondary selector for a hook, e.g. the tool name for onTool hooks."""

    model_config = ConfigDict(frozen=True)

    what: str


class BrainHookUnique(BaseModel):
    """Unique key of a hook. The filter is deliberately not part of it."""

    model_config = ConfigDict(frozen=True)

    author: str
    event: BrainHookEvent
    command: str


class BrainHook(BaseModel):
    """A vendor-neutral automation hook declared by a role."""

    model_config = ConfigDict(frozen=True)

    author: str
    event: BrainHookEvent
    command: str
    timeout: timedelta
    filter: Optional[BrainHookFilter] = None

    @property
    def unique(self) -> BrainHookUnique:
        return BrainHookUnique(author=self.author, event=self.event, command=self.command)


class BrainRole(BaseModel):
    """The role a brain is asked to play; briefs become the system prompt."""

    briefs: List[Path] = Field(default_factory=list)


def cast_briefs_to_prompt(briefs: List[Path]) -> str:
    """Concatenate brief files into a single system prompt."""
    sections = []
    for brief in briefs:
        content = Path(brief).read_text(encoding="utf-8").strip()
        sections.append(f"# brief: {Path(brief).name}\n\n{content}")
    return "\n\n".join(sections)


class BrainSpeed(BaseModel):
    model_config = ConfigDict(frozen=True)

    tokens_per_second: int
    latency_ms: int


class BrainPrice(BaseModel):
    """Prices in USD per million tokens."""

    model_config = ConfigDict(frozen=True)

    input: float
    output: float
    cache_get: float
    cache_set: float


class BrainGain(BaseModel):
    model_config = ConfigDict(frozen=True)

    context_tokens: int
    grades: Dict[str, int] = Field(default_factory=dict)
    cutoff: Optional[date] = None
    domain: str = "ALL"
    skills: Dict[str, bool] = Field(default_factory=dict)


class BrainSpec(BaseModel):
    """Cost and capability characteristics of a model."""

    model_config = ConfigDict(frozen=True)

    speed: BrainSpeed
    price: BrainPrice
    gain: BrainGain


class BrainTokenCounts(BaseModel):
    input: int = 0
    output: int = 0
    cache_get: int = 0
    cache_set: int = 0


class BrainCharCounts(BaseModel):
    input: int = 0
    output: int = 0


class BrainOutputMetrics(BaseModel):
    tokens: BrainTokenCounts = Field(default_factory=BrainTokenCounts)
    chars: BrainCharCounts = Field(default_factory=BrainCharCounts)
    elapsed_ms: float = 0.0


class BrainOutput(BaseModel, Generic[TOutput]):
    """Validated structured output plus usage metrics."""

    output: TOutput
    metrics: BrainOutputMetrics


class BrainHooksAdapter(ABC):
    """Persistence of role hooks into a specific brain's configuration."""

    slug: str

    @abstractmethod
    def get_one(
        self, author: str, event: BrainHookEvent, command: str
    ) -> Optional[BrainHook]:
        """Find a hook by its unique key."""

    @abstractmethod
    def get_all(
        self,
        author: Optional[str] = None,
        event: Optional[BrainHookEvent] = None,
        command: Optional[str] = None,
    ) -> List[BrainHook]:
        """List hooks, optionally narrowed by equality filters."""

    @abstractmethod
    def upsert(self, hook: BrainHook) -> BrainHook:
        """Insert the hook or update the stored one with the same unique key."""

    @abstractmethod
    def findsert(self, hook: BrainHook) -> BrainHook:
        """Return the stored hook with the same unique key, inserting it if absent."""

    @abstractmethod
    def delete(self, author: str, event: BrainHookEvent, command: str) -> None:
        """Remove a hook by its unique key. Missing hooks are not an error."""
