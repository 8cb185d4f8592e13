"""Exceptions raised for caller configuration errors.

Rendering itself never raises: unknown sort keys, out-of-range pages and
empty collections are all valid states. Only descriptors or component
arguments that cannot describe any table are rejected, at construction time.
"""


class DescriptorError(ValueError):
    """Raised when column/filter descriptors or table options are invalid.

    Examples:
    - Two filters in one set share the same key
    - An enumerated filter has no options
    - A column alignment or table mode outside the allowed values
    """

    pass
