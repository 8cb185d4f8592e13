"""Table component type registry.

List views can be declared as plain configuration (``{"type": "data_table",
"table_key": "users", ...}``) and built later with ``create_component``.
"""

from typing import TYPE_CHECKING, Any, Dict, Mapping, Type

if TYPE_CHECKING:
    from .base import BaseComponent

# Component type name -> class
_COMPONENT_REGISTRY: Dict[str, Type["BaseComponent"]] = {}

TYPE_KEY = "type"


def register_component(name: str):
    """
    Class decorator adding a table component to the registry.

    Args:
        name: Type name used in configuration (e.g., 'data_table')

    Returns:
        Decorator function

    Raises:
        ValueError: If another class already uses ``name``

    Example:
        @register_component("data_table")
        class DataTable(BaseComponent):
            ...
    """

    def decorator(cls: Type["BaseComponent"]) -> Type["BaseComponent"]:
        registered = _COMPONENT_REGISTRY.get(name)
        if registered is not None:
            raise ValueError(
                f"Table type '{name}' is already registered to {registered.__name__}"
            )
        _COMPONENT_REGISTRY[name] = cls
        cls._component_type = name
        return cls

    return decorator


def get_component_class(name: str) -> Type["BaseComponent"]:
    """
    Look up a table component class by type name.

    Raises:
        KeyError: If no component is registered with that name
    """
    try:
        return _COMPONENT_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"No table type registered as '{name}'. "
            f"Known types: {sorted(_COMPONENT_REGISTRY)}"
        ) from None


def create_component(config: Mapping[str, Any], **overrides: Any) -> "BaseComponent":
    """
    Build a table component from a configuration mapping.

    Args:
        config: Mapping with a ``type`` entry naming the component; every
            other entry is passed to the constructor
        **overrides: Constructor arguments that are not configuration,
            such as ``data`` or callbacks

    Returns:
        The constructed component

    Raises:
        KeyError: If ``type`` is missing or unknown
    """
    if TYPE_KEY not in config:
        raise KeyError(f"Table configuration needs a '{TYPE_KEY}' entry")
    arguments = {key: value for key, value in config.items() if key != TYPE_KEY}
    arguments.update(overrides)
    return get_component_class(config[TYPE_KEY])(**arguments)


def list_registered_components() -> Dict[str, Type["BaseComponent"]]:
    return dict(_COMPONENT_REGISTRY)


def is_registered(name: str) -> bool:
    return name in _COMPONENT_REGISTRY
