from .shadowcast import field_of_view
from .visibility import ExplorationState, VisibilityEngine

__all__ = ["ExplorationState", "VisibilityEngine", "field_of_view"]
