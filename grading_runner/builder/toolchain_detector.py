from pathlib import Path
from typing import Union

from grading_runner.common.config.constants import (
    GRADLE_MANIFESTS,
    JAVA_SOURCE_GLOB,
    MAVEN_MANIFEST,
    ToolchainVariant,
)
from grading_runner.common.exceptions.job_exceptions import UnsupportedToolchain
from grading_runner.common.utils.file_utils import has_any_file


class ToolchainDetector:
    def classify(self, root: Union[str, Path]) -> ToolchainVariant:
        root = Path(root)

        if (root / MAVEN_MANIFEST).is_file():
            return ToolchainVariant.MAVEN
        if any((root / manifest).is_file() for manifest in GRADLE_MANIFESTS):
            return ToolchainVariant.GRADLE
        if has_any_file(root, JAVA_SOURCE_GLOB):
            return ToolchainVariant.PLAIN_JAVA
        return ToolchainVariant.UNSUPPORTED

    def detect(self, root: Union[str, Path]) -> ToolchainVariant:
        variant = self.classify(root)
        if variant == ToolchainVariant.UNSUPPORTED:
            raise UnsupportedToolchain(
                f"Unsupported build system: {variant.value}",
                variant=variant.value,
            )
        return variant
