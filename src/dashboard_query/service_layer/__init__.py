"""Stateful services built on the pure search pipeline."""

from dashboard_query.service_layer.debounce import Debouncer
from dashboard_query.service_layer.query_controller import ControllerState, QueryController
from dashboard_query.service_layer.saved_searches import SavedSearchStore


__all__ = ["ControllerState", "Debouncer", "QueryController", "SavedSearchStore"]
