"""Loading and validation of the packaged switch protocol profile."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from roomectl.core.errors import ProfileLoadError, ProfileValidationError
from roomectl.core.model import GattEndpoint, SwitchAction, SwitchProfile

DEFAULT_PROFILE = "roome_switch.yaml"
LOGGER = logging.getLogger(__name__)


def _load_schema_validator() -> Any:
    schema = json.loads(
        resources.files("roomectl.schemas").joinpath("profile.schema.json").read_text(encoding="utf-8")
    )
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path | Traversable) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Could not read profile file {path}: {exc}") from exc
    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {path}: {exc}") from exc


def _hex_bytes(value: str, *, context: str, length: int) -> bytes:
    # The schema has already checked the characters and pairing.
    payload = bytes.fromhex(value)
    if len(payload) != length:
        raise ProfileValidationError(f"{context} must be exactly {length} byte(s)")
    return payload


def _build_profile(doc: Any, source: Path | Traversable) -> SwitchProfile:
    try:
        _load_schema_validator().validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    transport = doc["transport"]
    command = doc["command"]
    prefix = f"{doc['id']}.command"

    return SwitchProfile(
        id=doc["id"],
        name=doc["name"],
        endpoint=GattEndpoint(
            service_uuid=transport["service_uuid"].lower(),
            char_uuid=transport["write_char_uuid"].lower(),
            write_with_response=transport.get("write_with_response", True),
        ),
        preamble=_hex_bytes(command["preamble"], context=f"{prefix}.preamble", length=2),
        opcode=_hex_bytes(command["opcode"], context=f"{prefix}.opcode", length=1),
        field=_hex_bytes(command["field"], context=f"{prefix}.field", length=1),
        actions={
            action: _hex_bytes(command["actions"][action.value], context=f"{prefix}.actions.{action.value}", length=1)
            for action in SwitchAction
        },
        channels=tuple(sorted(doc["channels"])),
    )


def load_profile(path: Path | None = None) -> SwitchProfile:
    """Load a switch profile from ``path``, or the packaged default profile."""
    source: Path | Traversable = path if path is not None else resources.files("roomectl.profiles").joinpath(DEFAULT_PROFILE)
    LOGGER.debug("Loading switch profile from %s", source)
    return _build_profile(_read_yaml(source), source)


@lru_cache(maxsize=1)
def default_profile() -> SwitchProfile:
    return load_profile()
