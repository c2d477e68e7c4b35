"""
Route outcomes mapped to wire responses by the service's renderer.
"""

from dataclasses import dataclass
from typing import Union

from .models import GatewayResponse


@dataclass(frozen=True)
class Ok:
    response: GatewayResponse


@dataclass(frozen=True)
class NotFound:
    message: str


@dataclass(frozen=True)
class Unavailable:
    detail: str


Outcome = Union[Ok, NotFound, Unavailable]
