"""Run SpotBugs from an in-process worker thread."""

from spotbugs_launcher.dispatch import RunnerKind
from spotbugs_launcher.environments.local import ThreadWorkerEnvironment
from spotbugs_launcher.runners.base import SpotBugsRunner


class HybridRunner(SpotBugsRunner):
    """Starts the analyzer JVM from a worker thread without process isolation."""

    kind = RunnerKind.HYBRID
    description = "no-isolated worker"

    def create_environment(self, task) -> ThreadWorkerEnvironment:
        return ThreadWorkerEnvironment()
