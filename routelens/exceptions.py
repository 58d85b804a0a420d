"""Exceptions raised for caller-side configuration problems.

The introspection engine itself never raises: discovery, resolution and
extraction failures degrade to a null body. These exceptions cover inputs the
caller controls, such as route manifests and scan entry files.
"""


class RouteLensError(Exception):
    """Base class for routelens errors."""


class RouteRegistryError(RouteLensError):
    """A route manifest or registry structure could not be read."""


class RouteScanError(RouteLensError):
    """Static route scanning could not start."""
