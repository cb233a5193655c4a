"""Build parameters in the shape the build server's JSON form field expects.

The server wants ``{"parameter": [{"name": ..., "value": ...}, ...]}``. The
producer side is typed (a platform field always holds a Platform), the wire
side is plain strings.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Union

from constants import Constants
from errors import SerializationError
from buildreq.models import Platform, UnknownPlatform, UnknownVcs, Url, VcsSystem

logger = logging.getLogger(__name__)


class ParamKind(Enum):
    """Which typed value a BuildParamValue was built from."""

    STRING = "string"
    PLATFORM = "platform"
    URL = "url"
    VCS = "vcs"


@dataclass(frozen=True)
class BuildParamValue:
    """A typed parameter value whose wire form is always a bare string."""

    kind: ParamKind
    value: str

    @classmethod
    def of(cls, value: Union[str, Platform, UnknownPlatform, VcsSystem, UnknownVcs, Url]) -> "BuildParamValue":
        """Wrap ``value``, fixing its canonical string form now."""
        if isinstance(value, BuildParamValue):
            return value
        if isinstance(value, (Platform, UnknownPlatform)):
            return cls(ParamKind.PLATFORM, str(value))
        if isinstance(value, (VcsSystem, UnknownVcs)):
            return cls(ParamKind.VCS, str(value))
        if isinstance(value, Url):
            return cls(ParamKind.URL, str(value))
        return cls(ParamKind.STRING, str(value))

    def __str__(self) -> str:
        return self.value

    def to_json(self) -> str:
        return self.value


@dataclass(frozen=True)
class BuildParameter:
    """A single named parameter."""

    name: str
    value: BuildParamValue

    @classmethod
    def new(cls, name: str, value: Any) -> "BuildParameter":
        return cls(str(name), BuildParamValue.of(value))

    def to_json(self) -> Dict[str, str]:
        return {"name": self.name, "value": self.value.to_json()}


class ParameterList:
    """Append-only, ordered list of BuildParameters.

    Order and duplicate names are both preserved; ``push`` is the only mutator.
    """

    def __init__(self, capacity: int = Constants.PARAM_CNT):
        # capacity is a sizing hint only; the list grows past it freely
        self.capacity = capacity
        self._parameters: List[BuildParameter] = []

    def push(self, parameter: BuildParameter) -> None:
        """Append ``parameter``."""
        logger.debug("ParameterList.push %s=%r", parameter.name, parameter.value.value)
        self._parameters.append(parameter)

    def add(self, name: str, value: Any) -> "ParameterList":
        """Convenience: build a BuildParameter and push it. Returns self."""
        self.push(BuildParameter.new(name, value))
        return self

    @property
    def parameters(self) -> tuple:
        return tuple(self._parameters)

    def names(self) -> List[str]:
        return [p.name for p in self._parameters]

    def as_dict(self) -> Dict[str, str]:
        """Name to value mapping; later duplicates win. For display only."""
        return {p.name: p.value.value for p in self._parameters}

    def __iter__(self) -> Iterator[BuildParameter]:
        return iter(self._parameters)

    def __len__(self) -> int:
        return len(self._parameters)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterList):
            return NotImplemented
        return self.parameters == other.parameters

    def __repr__(self) -> str:
        return f"ParameterList({self._parameters!r})"

    def to_json(self) -> Dict[str, List[Dict[str, str]]]:
        return {"parameter": [p.to_json() for p in self._parameters]}

    def to_json_string(self) -> str:
        """Compact JSON text, keys in insertion order."""
        try:
            return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"unable to serialize build parameters: {exc}") from exc
