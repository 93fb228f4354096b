from enum import Enum, IntEnum
from typing import Final, Tuple


class JobStatus(str, Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ExitCode(IntEnum):
    SUCCESS = 0
    FAILURE = 1
    COMPILATION_FAILURE = 2
    INTERRUPTED = 130


class ToolchainVariant(str, Enum):
    MAVEN = "maven"
    GRADLE = "gradle"
    PLAIN_JAVA = "plain-java"
    UNSUPPORTED = "unknown"


class LogEntryType(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    COMPILATION = "COMPILATION"
    TEST_OUTPUT = "TEST_OUTPUT"
    TEST_PASSED = "TEST_PASSED"
    TEST_FAILED = "TEST_FAILED"
    TEST_RESULT = "TEST_RESULT"
    CODE = "CODE"
    CODE_FILE = "CODE_FILE"


class PipelineState(str, Enum):
    INIT = "init"
    ACQUIRED = "acquired"
    DETECTED = "detected"
    BUILT = "built"
    TESTED = "tested"
    EMITTED = "emitted"
    FAILED = "failed"


class OutputFormat(str, Enum):
    JSON = "json"
    JSON_PRETTY = "json-pretty"


DEFAULT_TIMEOUT_SECONDS: Final[int] = 300
UNIT_TIMEOUT_SECONDS: Final[int] = 30
DEFAULT_REVISION: Final[str] = "HEAD"
DEFAULT_JOB_ID: Final[str] = "unknown"

MAVEN_MANIFEST: Final[str] = "pom.xml"
GRADLE_MANIFESTS: Final[Tuple[str, ...]] = ("build.gradle", "build.gradle.kts")
GRADLE_WRAPPER: Final[str] = "gradlew"
JAVA_SOURCE_GLOB: Final[str] = "*.java"
CLASS_FILE_SUFFIX: Final[str] = ".class"
IGNORED_DIRECTORIES: Final[Tuple[str, ...]] = (".git",)

MAVEN_REPORT_DIR: Final[str] = "target/surefire-reports"
GRADLE_REPORT_DIR: Final[str] = "build/test-results/test"
REPORT_FILE_GLOB: Final[str] = "TEST-*.xml"

TEST_SOURCE_MARKERS: Final[Tuple[str, ...]] = ("test", "Test", "TEST")
TEST_CLASS_MARKER: Final[str] = "Test"
MAIN_METHOD_MARKER: Final[str] = "public static void main"
FAILURE_OUTPUT_PATTERN: Final[str] = r"fail|error|exception"

MAX_CODE_FILES: Final[int] = 10
MAX_CODE_FILE_CHARS: Final[int] = 10000

SUMMARY_HEADER: Final[str] = "=================== DETAILED TEST RESULTS ==================="
SUMMARY_FOOTER: Final[str] = "=================== END DETAILED RESULTS ==================="
