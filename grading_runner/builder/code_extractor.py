from pathlib import Path
from typing import List, Optional, Tuple

from grading_runner.builder.context import JobContext
from grading_runner.common.config.constants import (
    JAVA_SOURCE_GLOB,
    MAX_CODE_FILE_CHARS,
    MAX_CODE_FILES,
    LogEntryType,
)
from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.dto.code_file import CodeFile
from grading_runner.common.utils.file_utils import iter_files, safe_read_file


logger = get_logger(__name__)

TEST_PATH_MARKER = "test"


class CodeExtractor:
    def __init__(
        self,
        max_files: int = MAX_CODE_FILES,
        max_file_chars: int = MAX_CODE_FILE_CHARS,
    ):
        self.max_files = max_files
        self.max_file_chars = max_file_chars

    def collect(self, root: Path) -> List[Path]:
        candidates = sorted(
            path for path in iter_files(root, JAVA_SOURCE_GLOB)
            if TEST_PATH_MARKER not in str(path.relative_to(root)).lower()
        )
        return candidates[:self.max_files]

    def read(self, root: Path, path: Path) -> Optional[CodeFile]:
        content = safe_read_file(path, max_chars=self.max_file_chars)
        if content is None:
            return None
        return CodeFile(
            file_name=path.name,
            file_path=path.relative_to(root).as_posix(),
            content=content,
            size=len(content),
        )

    def extract(self, root: Path) -> Tuple[Optional[str], List[CodeFile]]:
        code_files: List[CodeFile] = []
        main_code: Optional[str] = None

        for path in self.collect(root):
            code_file = self.read(root, path)
            if code_file is None:
                continue
            code_files.append(code_file)
            if main_code is None and not _is_test_name(code_file.file_name):
                main_code = code_file.content

        return main_code, code_files

    def apply(self, context: JobContext) -> None:
        context.info("Extracting student code from repository")
        main_code, code_files = self.extract(context.repo_dir)

        for code_file in code_files:
            context.info(f"Extracted code from: {code_file.file_path} ({code_file.size} characters)")

        context.code_files = code_files
        context.extracted_code = main_code

        if main_code:
            context.info(f"Main student code extracted ({len(main_code)} characters)")
            context.log(LogEntryType.CODE, f"```java\n{main_code}\n```")
        else:
            context.warning("No main student code found")


def _is_test_name(file_name: str) -> bool:
    return "Test" in file_name or "test" in file_name
