class PlacementError(Exception):
    """Base exception for element placement errors."""


class NoRenderedPageError(PlacementError):
    """Raised when an element is added to a page that has not been rendered."""


class ElementNotFoundError(PlacementError):
    """Raised when an operation names an element id that does not exist."""


class OrphanedElementError(PlacementError):
    """Raised when an element points at a page the target document lacks."""


class RendererNotReadyError(PlacementError):
    """Raised when pages are requested before a document finished loading."""
