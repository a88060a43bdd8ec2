"""Combine settings layers into a single ResolvedPlan.

Precedence per field, highest first: invocation, profile, defaults.

- Booleans OR across all layers: turning a feature on anywhere enables
  it, and a lower layer can never switch it back off.
- Scalars: an invocation value that was given at all wins (even ''),
  else a non-empty profile value, else the default.
- Lists are replaced wholesale by the first non-empty layer, never
  concatenated.
"""

from __future__ import annotations

from typing import Any

from mkcd.models.config import ProfileConfig
from mkcd.models.plan import InvocationOptions, ResolvedPlan


def merge(
    profile: ProfileConfig | None,
    invocation: InvocationOptions,
    defaults: ResolvedPlan | None = None,
) -> ResolvedPlan:
    """Merge a profile and invocation overrides over the defaults layer.

    Total and deterministic; performs no I/O.
    """
    profile = profile or ProfileConfig()
    defaults = defaults or ResolvedPlan()
    resolved: dict[str, Any] = {}

    for name in ResolvedPlan.model_fields:
        default_value = getattr(defaults, name)
        given = getattr(invocation, name)
        from_profile = getattr(profile, name, None)

        if isinstance(default_value, bool):
            resolved[name] = bool(given) or bool(from_profile) or default_value
        elif isinstance(default_value, tuple):
            if given:
                resolved[name] = tuple(given)
            elif from_profile:
                resolved[name] = tuple(from_profile)
            else:
                resolved[name] = default_value
        elif given is not None:
            resolved[name] = given
        elif from_profile:
            resolved[name] = from_profile
        else:
            resolved[name] = default_value

    # Naming an editor implies opening one
    if resolved["editor_name"]:
        resolved["editor"] = True

    return ResolvedPlan(**resolved)
