"""Profile registry operations over a Config.

Every mutation returns a new Config and leaves the input untouched, so
a rejected operation can never leave the registry half-changed. The
registry invariant (a non-empty default profile name must reference an
existing profile) is re-checked after each mutation.
"""

from __future__ import annotations

from mkcd.errors import ConflictError, NotFoundError
from mkcd.models.config import Config, ProfileConfig


def _check_registry(config: Config) -> None:
    default = config.core.default_profile
    if default and default not in config.profiles:
        raise ConflictError(f"default profile '{default}' does not exist in the registry")


def _with_profiles(config: Config, profiles: dict[str, ProfileConfig], default: str | None = None) -> Config:
    core = config.core
    if default is not None:
        core = core.model_copy(update={"default_profile": default})
    updated = config.model_copy(update={"profiles": profiles, "core": core})
    _check_registry(updated)
    return updated


def get_profile(config: Config, name: str = "") -> ProfileConfig:
    """Return the named profile; an empty name means the default profile.

    Raises:
        NotFoundError: If the profile (or the default designation) is absent.
    """
    if not name:
        name = config.core.default_profile
        if not name:
            raise NotFoundError("profile", "<default>")
    try:
        return config.profiles[name]
    except KeyError:
        raise NotFoundError("profile", name, sorted(config.profiles)) from None


def resolve_profile(config: Config, name: str = "") -> ProfileConfig:
    """Like get_profile, but an unnamed lookup that fails yields an empty profile.

    An explicitly named profile that does not exist is still an error.

    Raises:
        NotFoundError: If an explicitly named profile is absent.
    """
    try:
        return get_profile(config, name)
    except NotFoundError:
        if name:
            raise
        return ProfileConfig()


def set_profile(config: Config, name: str, profile: ProfileConfig) -> Config:
    """Create or replace a profile."""
    if not name.strip():
        raise ConflictError("profile name must not be empty")
    profiles = dict(config.profiles)
    profiles[name] = profile
    return _with_profiles(config, profiles)


def delete_profile(config: Config, name: str) -> Config:
    """Remove a profile.

    Raises:
        ConflictError: If name is the designated default profile.
        NotFoundError: If no such profile exists.
    """
    if name == config.core.default_profile:
        raise ConflictError(f"cannot delete default profile '{name}'")
    if name not in config.profiles:
        raise NotFoundError("profile", name, sorted(config.profiles))
    profiles = {k: v for k, v in config.profiles.items() if k != name}
    return _with_profiles(config, profiles)


def copy_profile(config: Config, source: str, destination: str, overwrite: bool = False) -> Config:
    """Copy a profile under a new name.

    Raises:
        NotFoundError: If source does not exist.
        ConflictError: If destination exists and overwrite is False.
    """
    if source not in config.profiles:
        raise NotFoundError("profile", source, sorted(config.profiles))
    if destination in config.profiles and not overwrite:
        raise ConflictError(f"destination profile '{destination}' already exists")
    return set_profile(config, destination, config.profiles[source])


def set_default_profile(config: Config, name: str) -> Config:
    """Designate name as the default profile ('' clears the designation).

    Raises:
        NotFoundError: If name is non-empty and not in the registry.
    """
    if name and name not in config.profiles:
        raise NotFoundError("profile", name, sorted(config.profiles))
    return _with_profiles(config, dict(config.profiles), default=name)
