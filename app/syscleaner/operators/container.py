"""Container engine cache pruning."""

from syscleaner.core.executor import Command
from syscleaner.utils.shell import command_exists


class DockerEngine:
    """Prunes unused Docker images, containers, volumes and build cache."""

    # Pruning goes through the daemon socket, not through /var/lib/docker.
    cache_path = "/run/docker.sock"

    def is_available(self) -> bool:
        """Check if the docker CLI is installed."""
        return command_exists("docker")

    def prune_commands(self) -> list[Command]:
        """Commands pruning everything not used by a running container."""
        return [
            Command.external("docker", "system", "prune", "-af", "--volumes"),
            Command.external("docker", "builder", "prune", "-af"),
        ]
