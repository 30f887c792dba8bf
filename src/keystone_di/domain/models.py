from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from keystone_di.domain.enums import DuplicatePolicy, ResolutionKind


def recipe_name(recipe: Callable[..., Any]) -> str:
    """Human-readable name of a construction recipe."""
    return getattr(recipe, "__name__", None) or repr(recipe)


class RegisteredDependency(BaseModel):
    """Value object representing a token's registration.

    Attributes:
        recipe: Class (or other callable) used to build the value.
        resolution_kind: How long the built value lives.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    recipe: Callable[..., Any] = Field(..., description="The constructor used to build the dependency.")
    resolution_kind: ResolutionKind = Field(..., description="The lifetime of the registered dependency.")

    @property
    def recipe_name(self) -> str:
        return recipe_name(self.recipe)


class CachedResolvedDependency(BaseModel):
    """A value kept for SCOPED and SINGLETON registrations.

    The resolution kind is stored with the value so a scope reset can drop
    scoped entries without consulting the registration table.

    Attributes:
        value: The resolved instance.
        resolution_kind: Resolution kind the value was built with.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    value: Any = Field(..., description="The resolved instance.")
    resolution_kind: ResolutionKind = Field(..., description="The lifetime the value was cached for.")


class RegisterOptions(BaseModel):
    """Options accepted by the registration methods.

    Attributes:
        on_duplicate: What to do if the token is already registered.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    on_duplicate: DuplicatePolicy = Field(
        default=DuplicatePolicy.THROW,
        description="Whether a duplicate registration raises or is ignored.",
    )


class ContainerConfig(BaseModel):
    """Per-container behaviour switches.

    Attributes:
        check_for_captive_dependencies: Enforce the captive dependency rule.
        detect_circular_dependencies: Fail fast on dependency cycles instead
            of recursing until the interpreter gives up.
    """

    model_config = ConfigDict(frozen=True)

    check_for_captive_dependencies: bool = Field(
        default=True,
        description="Raise CaptiveDependencyError for longer-lived dependents of shorter-lived dependencies.",
    )
    detect_circular_dependencies: bool = Field(
        default=True,
        description="Raise CircularDependencyError when a dependency chain loops.",
    )
