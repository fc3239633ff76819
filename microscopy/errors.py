"""Domain errors raised by the scan session core.

Every error here is recoverable: the controller leaves the current result
and the history log untouched when one is raised. The presentation layer
turns them into non-blocking notices.
"""


class MicroscopyError(Exception):
    """Base class for all session errors."""


class InvalidResult(MicroscopyError, ValueError):
    """A scan produced data that does not satisfy the result contract."""


class AcquisitionError(MicroscopyError):
    """The scan source could not produce a result (instrument unavailable, timeout)."""


class NoActiveResult(MicroscopyError):
    """A save was requested while no result is current."""


class EmptyName(MicroscopyError, ValueError):
    """A save was confirmed with a blank sample name."""


class NotFound(MicroscopyError, LookupError):
    """No history entry exists for the requested id."""


class ScanInProgress(MicroscopyError):
    """A scan was requested while another acquisition is still running."""


class SaveWorkflowClosed(MicroscopyError):
    """The save workflow was used after it had been confirmed or cancelled."""


class PersistenceError(MicroscopyError):
    """The durable history backend failed to read or write."""
