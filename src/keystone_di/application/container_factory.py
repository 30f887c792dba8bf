import logging
from typing import Callable, Dict, Hashable, List, Optional

from keystone_di.application.container import Container
from keystone_di.application.metadata_registry import MetadataRegistry
from keystone_di.domain import DEFAULT_CONTAINER_NAME, ContainerConfig, IContainerFactory

logger = logging.getLogger(__name__)


class ContainerFactory(IContainerFactory):
    """Keeps one container per name, creating containers on first request.

    Containers created by a factory share its metadata registry and config,
    so metadata recorded once during bootstrap applies to every container.

    A factory is ordinary state: build one at start-up and pass it where it
    is needed. `get_instance` offers a lazily created process-wide factory
    for the decorator layer; `reset_instance` tears it down.

    Attributes:
        _container_class: Callable building a container from config and metadata.
        _metadata: Metadata registry shared by every created container.
        _config: Config shared by every created container.
        _containers: Created containers keyed by name.
    """

    _instance: Optional["ContainerFactory"] = None

    def __init__(
        self,
        container_class: Callable[..., Container] = Container,
        metadata: Optional[MetadataRegistry] = None,
        config: Optional[ContainerConfig] = None,
    ) -> None:
        """Initialize a factory with no containers.

        Args:
            container_class: Container type to instantiate.
            metadata: Metadata registry handed to each container.
            config: Config handed to each container.
        """
        self._container_class = container_class
        self._metadata = metadata if metadata is not None else MetadataRegistry()
        self._config = config if config is not None else ContainerConfig()
        self._containers: Dict[Hashable, Container] = {}

    @classmethod
    def get_instance(cls) -> "ContainerFactory":
        """Return the process-wide factory, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Discard the process-wide factory and every container it created."""
        if cls._instance is not None:
            cls._instance.clear()
        cls._instance = None

    @property
    def metadata(self) -> MetadataRegistry:
        return self._metadata

    def get_container(self, name: Optional[Hashable] = None) -> Container:
        """Return the container with the given name, creating it on first request.

        Args:
            name: Container name. None selects the default container.

        Returns:
            The same container for every call with the same name.

        Example:
            >>> factory = ContainerFactory()
            >>> assert factory.get_container("http") is factory.get_container("http")
            >>> assert factory.get_container() is factory.get_container(None)
        """
        container_name = DEFAULT_CONTAINER_NAME if name is None else name

        container = self._containers.get(container_name)
        if container is None:
            container = self._container_class(config=self._config, metadata=self._metadata)
            self._containers[container_name] = container
            logger.debug("Created container %r", container_name)
        return container

    def container_names(self) -> List[Hashable]:
        """Names of the containers created so far."""
        return list(self._containers)

    def clear(self) -> None:
        """Forget every created container."""
        self._containers.clear()
