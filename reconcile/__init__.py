"""Reactor/actor reconciliation between a live item collection and derived items."""

from .errors import WiringError
from .actor import Actor, ActorKind, Reactor
from .patcher import Patcher, ItemStore
from .reconciler import Reconciler
from .session import SceneSession
