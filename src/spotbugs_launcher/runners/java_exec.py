"""Run SpotBugs as a plain child process."""

from spotbugs_launcher.dispatch import RunnerKind
from spotbugs_launcher.environments.local import LocalEnvironment
from spotbugs_launcher.runners.base import SpotBugsRunner


class JavaExecRunner(SpotBugsRunner):
    """Spawns the analyzer JVM directly."""

    kind = RunnerKind.JAVA_EXEC
    description = "JavaExec"

    def create_environment(self, task) -> LocalEnvironment:
        return LocalEnvironment()
