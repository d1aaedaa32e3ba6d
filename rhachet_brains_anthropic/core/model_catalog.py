"""Packaged model metadata for anthropic brain slugs.

Prices are USD per million tokens; see
https://platform.claude.com/docs/en/about-claude/pricing and
https://platform.claude.com/docs/en/build-with-claude/context-windows
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict

from rhachet_brains_anthropic.core.brain import (
    BrainGain,
    BrainPrice,
    BrainSpec,
    BrainSpeed,
)
from rhachet_brains_anthropic.core.errors import BrainSlugNotFoundError

_SKILLS = {"tooluse": True, "vision": True}


class BrainAtomConfig(BaseModel):
    """Model id, description and spec behind an atom slug."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str
    description: str
    spec: BrainSpec


def _spec(
    *,
    tokens_per_second: int,
    latency_ms: int,
    price: tuple[float, float, float, float],
    grades: Dict[str, int],
    cutoff: date,
) -> BrainSpec:
    price_input, price_output, cache_get, cache_set = price
    return BrainSpec(
        speed=BrainSpeed(tokens_per_second=tokens_per_second, latency_ms=latency_ms),
        price=BrainPrice(
            input=price_input, output=price_output, cache_get=cache_get, cache_set=cache_set
        ),
        gain=BrainGain(context_tokens=200_000, grades=grades, cutoff=cutoff, skills=_SKILLS),
    )


_HAIKU_V3_5 = BrainAtomConfig(
    model="claude-3-5-haiku-20241022",
    description="claude haiku 3.5 - fast and cost-effective",
    spec=_spec(
        tokens_per_second=65,
        latency_ms=700,
        price=(0.80, 4.0, 0.08, 1.0),
        grades={"swe": 40, "mmlu": 75, "humaneval": 88},
        cutoff=date(2024, 4, 1),
    ),
)

_HAIKU_V4_5 = BrainAtomConfig(
    model="claude-haiku-4-5-20251001",
    description="claude haiku 4.5 - fastest and most cost-effective",
    spec=_spec(
        tokens_per_second=100,
        latency_ms=500,
        price=(1.0, 5.0, 0.10, 1.25),
        grades={"swe": 73, "mmlu": 80, "humaneval": 88},
        cutoff=date(2025, 4, 1),
    ),
)

_SONNET_V4 = BrainAtomConfig(
    model="claude-sonnet-4-20250514",
    description="claude sonnet 4 - balanced performance and capability",
    spec=_spec(
        tokens_per_second=66,
        latency_ms=900,
        price=(3.0, 15.0, 0.30, 3.75),
        grades={"swe": 72, "mmlu": 87, "humaneval": 91},
        cutoff=date(2025, 4, 1),
    ),
)

_SONNET_V4_5 = BrainAtomConfig(
    model="claude-sonnet-4-5-20250929",
    description="claude sonnet 4.5 - balanced performance and capability",
    spec=_spec(
        tokens_per_second=72,
        latency_ms=970,
        price=(3.0, 15.0, 0.30, 3.75),
        grades={"swe": 77, "mmlu": 89, "humaneval": 93},
        cutoff=date(2025, 4, 1),
    ),
)

_OPUS_V4 = BrainAtomConfig(
    model="claude-opus-4-20250514",
    description="claude opus 4 - highly capable for complex reasoning",
    spec=_spec(
        tokens_per_second=26,
        latency_ms=2100,
        price=(15.0, 75.0, 1.50, 18.75),
        grades={"swe": 72, "mmlu": 89, "humaneval": 93},
        cutoff=date(2025, 4, 1),
    ),
)

_OPUS_V4_5 = BrainAtomConfig(
    model="claude-opus-4-5-20251101",
    description="claude opus 4.5 - most capable for complex reasoning",
    spec=_spec(
        tokens_per_second=30,
        latency_ms=1500,
        # opus 4.5 pricing is a third of opus 4
        price=(5.0, 25.0, 0.50, 6.25),
        grades={"swe": 81, "mmlu": 90, "humaneval": 95},
        cutoff=date(2025, 5, 1),
    ),
)

CONFIG_BY_ATOM_SLUG: Dict[str, BrainAtomConfig] = {
    # aliases point at the latest concrete version
    "claude/haiku": _HAIKU_V4_5,
    "claude/sonnet": _SONNET_V4_5,
    "claude/opus": _OPUS_V4_5,
    "claude/haiku/v3.5": _HAIKU_V3_5,
    "claude/haiku/v4.5": _HAIKU_V4_5,
    "claude/sonnet/v4": _SONNET_V4,
    "claude/sonnet/v4.5": _SONNET_V4_5,
    "claude/opus/v4": _OPUS_V4,
    "claude/opus/v4.5": _OPUS_V4_5,
}

CONFIG_BY_REPL_SLUG: Dict[str, BrainAtomConfig] = {
    "claude/code": CONFIG_BY_ATOM_SLUG["claude/sonnet"],
    "claude/code/haiku": CONFIG_BY_ATOM_SLUG["claude/haiku"],
    "claude/code/haiku/v4.5": CONFIG_BY_ATOM_SLUG["claude/haiku/v4.5"],
    "claude/code/sonnet": CONFIG_BY_ATOM_SLUG["claude/sonnet"],
    "claude/code/sonnet/v4": CONFIG_BY_ATOM_SLUG["claude/sonnet/v4"],
    "claude/code/sonnet/v4.5": CONFIG_BY_ATOM_SLUG["claude/sonnet/v4.5"],
    "claude/code/opus": CONFIG_BY_ATOM_SLUG["claude/opus"],
    "claude/code/opus/v4.5": CONFIG_BY_ATOM_SLUG["claude/opus/v4.5"],
}

# None lets the claude CLI pick its default model.
MODEL_BY_REPL_SLUG: Dict[str, Optional[str]] = {
    "claude/code": None,
    "claude/code/haiku": "claude-haiku-4-5-20251001",
    "claude/code/haiku/v4.5": "claude-haiku-4-5-20251001",
    "claude/code/sonnet": "claude-sonnet-4-5-20250929",
    "claude/code/sonnet/v4": "claude-sonnet-4-20250514",
    "claude/code/sonnet/v4.5": "claude-sonnet-4-5-20250929",
    "claude/code/opus": "claude-opus-4-5-20251101",
    "claude/code/opus/v4.5": "claude-opus-4-5-20251101",
}


def get_atom_config(slug: str) -> BrainAtomConfig:
    """Lookup the config for an atom slug."""
    try:
        return CONFIG_BY_ATOM_SLUG[slug]
    except KeyError:
        raise BrainSlugNotFoundError(slug, sorted(CONFIG_BY_ATOM_SLUG)) from None


def get_repl_config(slug: str) -> BrainAtomConfig:
    """Lookup the config for a repl slug."""
    try:
        return CONFIG_BY_REPL_SLUG[slug]
    except KeyError:
        raise BrainSlugNotFoundError(slug, sorted(CONFIG_BY_REPL_SLUG)) from None
