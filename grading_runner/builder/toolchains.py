from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, List

from grading_runner.common.config.constants import (
    GRADLE_REPORT_DIR,
    GRADLE_WRAPPER,
    MAVEN_REPORT_DIR,
    ToolchainVariant,
)


@dataclass(frozen=True)
class ToolchainProfile:
    variant: ToolchainVariant
    display_name: str
    executable: str
    compile_args: Tuple[str, ...]
    test_args: Tuple[str, ...]
    report_dir: str
    wrapper: Optional[str] = None

    def resolve_executable(self, root: Path) -> str:
        if self.wrapper and (root / self.wrapper).is_file():
            return f"./{self.wrapper}"
        return self.executable

    def compile_command(self, root: Path) -> List[str]:
        return [self.resolve_executable(root), *self.compile_args]

    def test_command(self, root: Path) -> List[str]:
        return [self.resolve_executable(root), *self.test_args]

    def report_path(self, root: Path) -> Path:
        return root / self.report_dir


MAVEN = ToolchainProfile(
    variant=ToolchainVariant.MAVEN,
    display_name="Maven",
    executable="mvn",
    compile_args=("clean", "compile", "test-compile"),
    test_args=("test", "-Dmaven.test.failure.ignore=true"),
    report_dir=MAVEN_REPORT_DIR,
)

GRADLE = ToolchainProfile(
    variant=ToolchainVariant.GRADLE,
    display_name="Gradle",
    executable="gradle",
    compile_args=("clean", "compileJava", "compileTestJava"),
    test_args=("test", "--continue"),
    report_dir=GRADLE_REPORT_DIR,
    wrapper=GRADLE_WRAPPER,
)

MANIFEST_PROFILES: Dict[ToolchainVariant, ToolchainProfile] = {
    ToolchainVariant.MAVEN: MAVEN,
    ToolchainVariant.GRADLE: GRADLE,
}
