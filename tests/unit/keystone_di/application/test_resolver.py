"""Unit tests for DependencyResolver."""

from typing import Any

import pytest

from keystone_di.application.container import Container
from keystone_di.application.resolver import DependencyResolver
from keystone_di.domain import (
    CaptiveDependencyError,
    CircularDependencyError,
    ContainerConfig,
    IDependencyResolver,
    InvalidDependencyError,
    MissingDependencyError,
    RegisteredDependency,
    ResolutionKind,
    Token,
)


class TestResolverInitialization:
    """Test cases for DependencyResolver initialization."""

    def test_implements_interface(self):
        """Test that DependencyResolver implements IDependencyResolver."""
        assert isinstance(DependencyResolver(Container()), IDependencyResolver)

    def test_resolves_from_given_container(self):
        """Test that a resolver reads the registration table of its container."""
        container = Container()

        class Logger:
            pass

        container.register_singleton(Logger)
        resolver = DependencyResolver(container)

        instance = resolver.resolve_dependency(container.create_dependency_token(Logger))

        assert isinstance(instance, Logger)
        assert container.cached_resolved_dependencies[container.create_dependency_token(Logger)].value is instance


class TestMissingDependencies:
    """Test cases for unregistered tokens."""

    def test_unregistered_token_raises(self):
        """Test that resolving an unregistered token raises MissingDependencyError."""
        container = Container()
        resolver = DependencyResolver(container)

        with pytest.raises(MissingDependencyError) as exc_info:
            resolver.resolve_dependency(Token("Mailer"))

        assert exc_info.value.token_name == "Mailer"

    def test_unregistered_constructor_parameter_raises(self):
        """Test that an unregistered parameter type fails the whole resolution."""
        container = Container()

        class Database:
            pass

        class Repository:
            def __init__(self, database: Database):
                self.database = database

        container.register_transient(Repository)

        with pytest.raises(MissingDependencyError) as exc_info:
            container.resolve(Repository)

        assert exc_info.value.token_name == "Database"


class TestCaptiveDependencyRule:
    """Test cases for the captive dependency check."""

    @pytest.mark.parametrize(
        "dependent_kind, dependency_kind",
        [
            (ResolutionKind.TRANSIENT, ResolutionKind.TRANSIENT),
            (ResolutionKind.TRANSIENT, ResolutionKind.SCOPED),
            (ResolutionKind.TRANSIENT, ResolutionKind.SINGLETON),
            (ResolutionKind.SCOPED, ResolutionKind.SCOPED),
            (ResolutionKind.SCOPED, ResolutionKind.SINGLETON),
            (ResolutionKind.SINGLETON, ResolutionKind.SINGLETON),
        ],
    )
    def test_allowed_combinations(self, dependent_kind, dependency_kind):
        """Test that dependents may use equal- or longer-lived dependencies."""
        container = Container()

        class Dependency:
            pass

        class Dependent:
            def __init__(self, dependency: Dependency):
                self.dependency = dependency

        container.register(Dependency, dependency_kind)
        container.register(Dependent, dependent_kind)

        instance = container.resolve(Dependent)

        assert isinstance(instance.dependency, Dependency)

    @pytest.mark.parametrize(
        "dependent_kind, dependency_kind",
        [
            (ResolutionKind.SINGLETON, ResolutionKind.TRANSIENT),
            (ResolutionKind.SINGLETON, ResolutionKind.SCOPED),
            (ResolutionKind.SCOPED, ResolutionKind.TRANSIENT),
        ],
    )
    def test_rejected_combinations(self, dependent_kind, dependency_kind):
        """Test that longer-lived dependents cannot capture shorter-lived dependencies."""
        container = Container()

        class Dependency:
            pass

        class Dependent:
            def __init__(self, dependency: Dependency):
                self.dependency = dependency

        container.register(Dependency, dependency_kind)
        container.register(Dependent, dependent_kind)

        with pytest.raises(CaptiveDependencyError) as exc_info:
            container.resolve(Dependent)

        error = exc_info.value
        assert error.dependent_name == "Dependent"
        assert error.dependent_kind is dependent_kind
        assert error.dependency_name == "Dependency"
        assert error.dependency_kind is dependency_kind

    def test_nested_captive_dependency_is_detected(self):
        """Test that the rule is checked at every level of the graph."""
        container = Container()

        class Session:
            pass

        class Repository:
            def __init__(self, session: Session):
                self.session = session

        class Service:
            def __init__(self, repository: Repository):
                self.repository = repository

        container.register_transient(Service)
        container.register_singleton(Repository)
        container.register_transient(Session)

        with pytest.raises(CaptiveDependencyError) as exc_info:
            container.resolve(Service)

        assert exc_info.value.dependent_name == "Repository"
        assert exc_info.value.dependency_name == "Session"

    def test_top_level_resolution_has_no_parent(self):
        """Test that resolving a transient directly is never captive."""
        container = Container()

        class Session:
            pass

        container.register_transient(Session)

        assert isinstance(container.resolve(Session), Session)

    def test_check_can_be_disabled(self):
        """Test that the check is skipped when disabled in the config."""
        container = Container(config=ContainerConfig(check_for_captive_dependencies=False))

        class Session:
            pass

        class Repository:
            def __init__(self, session: Session):
                self.session = session

        container.register_singleton(Repository)
        container.register_transient(Session)

        assert isinstance(container.resolve(Repository).session, Session)

    def test_explicit_parent_dependency(self):
        """Test resolve_dependency with an explicit parent registration."""
        container = Container()

        class Session:
            pass

        class Holder:
            pass

        container.register_transient(Session)
        parent = RegisteredDependency(recipe=Holder, resolution_kind=ResolutionKind.SINGLETON)
        resolver = DependencyResolver(container)

        with pytest.raises(CaptiveDependencyError):
            resolver.resolve_dependency(container.create_dependency_token(Session), parent)


class TestCachingPolicy:
    """Test cases for caching by resolution kind."""

    def test_transient_is_never_cached(self):
        """Test that transient values are built every time and not cached."""
        container = Container()

        class Command:
            pass

        container.register_transient(Command)

        first = container.resolve(Command)
        second = container.resolve(Command)

        assert first is not second
        assert container.cached_resolved_dependencies == {}

    @pytest.mark.parametrize("kind", [ResolutionKind.SCOPED, ResolutionKind.SINGLETON])
    def test_cached_kinds_store_value_and_kind(self, kind):
        """Test that cached values are tagged with their resolution kind."""
        container = Container()

        class Service:
            pass

        container.register(Service, kind)
        instance = container.resolve(Service)

        cached = container.cached_resolved_dependencies[container.create_dependency_token(Service)]
        assert cached.value is instance
        assert cached.resolution_kind is kind

    def test_falsy_singleton_is_cached(self):
        """Test that a value evaluating to False is still served from the cache."""
        container = Container()
        calls = []

        class Empty:
            def __init__(self):
                calls.append(self)

            def __bool__(self):
                return False

        container.register_singleton(Empty)

        assert container.resolve(Empty) is container.resolve(Empty)
        assert len(calls) == 1

    def test_failed_construction_is_not_cached(self):
        """Test that a recipe raising leaves no cache entry behind."""
        container = Container()
        attempts = []

        class Flaky:
            def __init__(self):
                attempts.append(1)
                if len(attempts) == 1:
                    raise RuntimeError("boom")

        container.register_singleton(Flaky)

        with pytest.raises(RuntimeError, match="boom"):
            container.resolve(Flaky)

        assert container.cached_resolved_dependencies == {}
        assert isinstance(container.resolve(Flaky), Flaky)


class TestConstructionAlgorithm:
    """Test cases for argument resolution."""

    def test_arguments_passed_positionally_in_order(self):
        """Test that resolved arguments follow parameter order."""
        container = Container()

        class First:
            pass

        class Second:
            pass

        class Consumer:
            def __init__(self, first: First, second: Second):
                self.first = first
                self.second = second

        container.register_singleton(First)
        container.register_singleton(Second)
        container.register_transient(Consumer)

        consumer = container.resolve(Consumer)

        assert consumer.first is container.resolve(First)
        assert consumer.second is container.resolve(Second)

    def test_manual_injection_takes_precedence(self):
        """Test that a manual injection entry wins over the reflected type."""
        container = Container()
        special = Token("SpecialClock")

        class Clock:
            pass

        class FrozenClock(Clock):
            pass

        class Scheduler:
            def __init__(self, clock: Clock):
                self.clock = clock

        container.register_singleton(Clock)
        container.register_singleton(special, FrozenClock)
        container.register_transient(Scheduler)
        container.metadata.set_manual_injection(Scheduler, 0, special)

        assert type(container.resolve(Scheduler).clock) is FrozenClock

    def test_manual_injection_for_unannotated_parameter(self):
        """Test that a manual entry resolves a parameter without type hint."""
        container = Container()
        url = Token("DatabaseUrl")

        class Url:
            pass

        class Database:
            def __init__(self, url):
                self.url = url

        container.register_singleton(url, Url)
        container.register_singleton(Database)
        container.metadata.set_manual_injection(Database, 0, url)

        assert isinstance(container.resolve(Database).url, Url)

    def test_manual_injection_beyond_reflected_parameters(self):
        """Test that a manual index past the reflected list extends the argument count."""
        container = Container()
        retries = Token("Retries")

        class Logger:
            pass

        class RetryPolicy:
            pass

        class Client:
            def __init__(self, logger: Logger, policy=None):
                self.logger = logger
                self.policy = policy

        container.register_singleton(Logger)
        container.register_singleton(retries, RetryPolicy)
        container.register_transient(Client)
        container.metadata.set_manual_injection(Client, 1, retries)

        client = container.resolve(Client)

        assert isinstance(client.logger, Logger)
        assert isinstance(client.policy, RetryPolicy)

    def test_unknown_parameter_type_raises(self):
        """Test that an untyped parameter raises InvalidDependencyError."""
        container = Container()

        class Logger:
            pass

        class Service:
            def __init__(self, logger: Logger, anything: Any):
                pass

        container.register_singleton(Logger)
        container.register_transient(Service)

        with pytest.raises(InvalidDependencyError) as exc_info:
            container.resolve(Service)

        assert exc_info.value.index == 1
        assert exc_info.value.dependent_name == "Service"

    def test_gap_between_manual_indexes_raises(self):
        """Test that a missing index below a manual entry raises InvalidDependencyError."""
        container = Container()
        token = Token("Value")

        class Value:
            pass

        def build(first, second):
            return (first, second)

        pair = Token("Pair")
        container.register_singleton(token, Value)
        container.register_transient(pair, build)
        container.metadata.set_manual_injection(build, 1, token)

        with pytest.raises(InvalidDependencyError) as exc_info:
            container.resolve(pair)

        assert exc_info.value.index == 0
        assert exc_info.value.dependent_name == "build"

    def test_explicit_parameter_types(self):
        """Test construction from explicitly recorded parameter types."""
        container = Container()

        class Logger:
            pass

        class Service:
            def __init__(self, logger):
                self.logger = logger

        container.metadata.set_parameter_types(Service, [Logger])
        container.register_singleton(Logger)
        container.register_transient(Service)

        assert container.resolve(Service).logger is container.resolve(Logger)

    def test_factory_function_recipe(self):
        """Test that a function can serve as a recipe."""
        container = Container()
        connection = Token("Connection")

        class Settings:
            def __init__(self):
                self.dsn = "sqlite://"

        def connect(settings: Settings) -> str:
            return f"connected to {settings.dsn}"

        container.register_singleton(Settings)
        container.register_singleton(connection, connect)

        assert container.resolve(connection) == "connected to sqlite://"

    def test_constructor_errors_propagate_unchanged(self):
        """Test that exceptions raised by recipes are not wrapped."""
        container = Container()

        class Broken:
            def __init__(self):
                raise ValueError("bad config")

        container.register_transient(Broken)

        with pytest.raises(ValueError, match="bad config"):
            container.resolve(Broken)


class TestCircularDependencies:
    """Test cases for cycle detection."""

    def test_direct_cycle_raises(self):
        """Test that a self-referencing dependency raises."""
        container = Container()
        node = Token("Node")

        class Node:
            def __init__(self, parent):
                self.parent = parent

        container.register_transient(node, Node)
        container.metadata.set_manual_injection(Node, 0, node)

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve(node)

        assert exc_info.value.dependency_chain == ["Node", "Node"]

    def test_indirect_cycle_raises(self):
        """Test that a cycle through another dependency raises."""
        container = Container()
        service_a = Token("ServiceA")
        service_b = Token("ServiceB")

        class ServiceA:
            def __init__(self, b):
                self.b = b

        class ServiceB:
            def __init__(self, a):
                self.a = a

        container.register_singleton(service_a, ServiceA)
        container.register_singleton(service_b, ServiceB)
        container.metadata.set_manual_injection(ServiceA, 0, service_b)
        container.metadata.set_manual_injection(ServiceB, 0, service_a)

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve(service_a)

        assert exc_info.value.dependency_chain == ["ServiceA", "ServiceB", "ServiceA"]

    def test_stack_is_cleared_after_failure(self):
        """Test that a failed resolution does not poison later resolutions."""
        container = Container()

        class Broken:
            def __init__(self):
                raise RuntimeError("boom")

        class Healthy:
            pass

        container.register_transient(Broken)
        container.register_transient(Healthy)

        with pytest.raises(RuntimeError):
            container.resolve(Broken)

        assert isinstance(container.resolve(Healthy), Healthy)
        with pytest.raises(RuntimeError):
            container.resolve(Broken)

    def test_shared_dependency_is_not_a_cycle(self):
        """Test that a diamond-shaped graph resolves."""
        container = Container()

        class Config:
            pass

        class Left:
            def __init__(self, config: Config):
                self.config = config

        class Right:
            def __init__(self, config: Config):
                self.config = config

        class Top:
            def __init__(self, left: Left, right: Right):
                self.left = left
                self.right = right

        container.register_singleton(Config)
        container.register_transient(Left)
        container.register_transient(Right)
        container.register_transient(Top)

        top = container.resolve(Top)

        assert top.left.config is top.right.config
