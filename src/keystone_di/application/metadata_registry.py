import inspect
import logging
from typing import Any, Callable, Dict, Iterable, List, get_type_hints

from keystone_di.domain import UNKNOWN, IMetadataSource, Token, recipe_name

logger = logging.getLogger(__name__)

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class MetadataRegistry(IMetadataSource):
    """Holds the constructor metadata the resolver builds recipes from.

    Two facts are kept per recipe: manual injection overrides (parameter
    index to Token) and the ordered list of constructor parameter types.
    Parameter types can be recorded explicitly during bootstrap; otherwise
    they are reflected once from the recipe's type hints and memoized.

    Attributes:
        _manual_injections: Overrides recorded per recipe.
        _parameter_types: Explicit or previously reflected parameter types.
    """

    def __init__(self) -> None:
        """Initialize an empty metadata registry."""
        self._manual_injections: Dict[Callable[..., Any], Dict[int, Token]] = {}
        self._parameter_types: Dict[Callable[..., Any], List[Any]] = {}

    def set_manual_injection(self, recipe: Callable[..., Any], index: int, token: Token) -> None:
        """Inject `token` at constructor parameter `index` of `recipe`.

        Args:
            recipe: The recipe receiving the override.
            index: Zero-based constructor parameter position (``self`` excluded).
            token: Token to resolve for that parameter.

        Raises:
            ValueError: If the index is negative.
            TypeError: If the token is not a Token.
        """
        if index < 0:
            raise ValueError(f"Parameter index must be non-negative, got {index}")
        if not isinstance(token, Token):
            raise TypeError(f"Expected a Token for parameter {index} of {recipe_name(recipe)}, got {token!r}")
        self._manual_injections.setdefault(recipe, {})[index] = token

    def set_parameter_types(self, recipe: Callable[..., Any], parameter_types: Iterable[Any]) -> None:
        """Record the constructor parameter types of `recipe` explicitly.

        Entries that are not concrete classes are stored as UNKNOWN.

        Args:
            recipe: The recipe to describe.
            parameter_types: One entry per constructor parameter, in order.
        """
        self._parameter_types[recipe] = [_as_reflected_type(param_type) for param_type in parameter_types]

    def get_manual_injection_map(self, recipe: Callable[..., Any]) -> Dict[int, Token]:
        return dict(self._manual_injections.get(recipe, {}))

    def get_reflected_parameter_types(self, recipe: Callable[..., Any]) -> List[Any]:
        if recipe not in self._parameter_types:
            self._parameter_types[recipe] = self._reflect(recipe)
        return list(self._parameter_types[recipe])

    def forget(self, recipe: Callable[..., Any]) -> None:
        """Drop the manual injections and parameter types of `recipe`."""
        self._manual_injections.pop(recipe, None)
        self._parameter_types.pop(recipe, None)

    def clear(self) -> None:
        """Forget all recorded and reflected metadata."""
        self._manual_injections.clear()
        self._parameter_types.clear()

    def _reflect(self, recipe: Callable[..., Any]) -> List[Any]:
        """Read positional parameter types from the recipe's constructor.

        Parameters are taken up to the first one with a default value, so
        optional trailing arguments are left to the constructor.
        """
        target = recipe.__init__ if inspect.isclass(recipe) else recipe
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            return []

        hints = _type_hints(target, recipe)

        parameter_types: List[Any] = []
        for index, (param_name, param) in enumerate(signature.parameters.items()):
            if index == 0 and inspect.isclass(recipe):
                continue
            if param.kind not in _POSITIONAL_KINDS:
                continue
            if param.default is not inspect.Parameter.empty:
                break
            parameter_types.append(_as_reflected_type(hints.get(param_name, UNKNOWN)))
        return parameter_types


def _type_hints(target: Callable[..., Any], recipe: Callable[..., Any]) -> Dict[str, Any]:
    try:
        return get_type_hints(target)
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, recipe_name(recipe))
        return dict(getattr(target, "__annotations__", {}))
    except TypeError:
        return {}


def _as_reflected_type(param_type: Any) -> Any:
    if inspect.isclass(param_type) and param_type not in (object, Any):
        return param_type
    return UNKNOWN
