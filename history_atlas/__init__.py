"""Time-scrubbed map viewer for historical events and migration routes."""

from history_atlas.classify import ClassRule, Classifier, VisualClass, default_classifier
from history_atlas.domain import (
    ContinuousRange,
    DiscreteTimeline,
    build_domain,
)
from history_atlas.errors import (
    DataFetchError,
    EmptyDomainError,
    HistoryAtlasError,
    MalformedRecordError,
)
from history_atlas.filtering import ExactMatch, Windowed, select
from history_atlas.records import Event, PathPoint, Route
from history_atlas.reconcile import LayerReconciler, PresentationPort

__all__ = [
    "ClassRule",
    "Classifier",
    "ContinuousRange",
    "DataFetchError",
    "DiscreteTimeline",
    "EmptyDomainError",
    "Event",
    "ExactMatch",
    "HistoryAtlasError",
    "LayerReconciler",
    "MalformedRecordError",
    "PathPoint",
    "PresentationPort",
    "Route",
    "VisualClass",
    "Windowed",
    "build_domain",
    "default_classifier",
    "select",
]
