from typing import Optional, List, Tuple
from pathlib import Path
import xml.etree.ElementTree as ET

from grading_runner.common.config.constants import REPORT_FILE_GLOB
from grading_runner.common.config.logging_config import get_logger
from grading_runner.common.dto.test_result import TestCaseResult
from grading_runner.common.exceptions.job_exceptions import ReportParseError
from grading_runner.common.utils.time_utils import seconds_to_millis


logger = get_logger(__name__)

FAILURE_TAGS = ("failure", "error")
PASSED_OUTPUT = "Test passed"
FAILED_OUTPUT = "Test failed"


class JUnitReportParser:
    def parse_directory(self, report_dir: Path) -> Tuple[List[TestCaseResult], List[ReportParseError]]:
        results: List[TestCaseResult] = []
        errors: List[ReportParseError] = []

        if not report_dir.is_dir():
            logger.debug(f"Report directory not found: {report_dir}")
            return results, errors

        for report in sorted(report_dir.glob(REPORT_FILE_GLOB)):
            try:
                results.extend(self.parse_file(report))
            except ReportParseError as e:
                errors.append(e)

        return results, errors

    def parse_file(self, report_path: Path) -> List[TestCaseResult]:
        try:
            tree = ET.parse(report_path)
        except (ET.ParseError, OSError) as e:
            raise ReportParseError(
                f"Failed to parse test report {report_path.name}: {e}",
                report_path=str(report_path),
                cause=e,
            )
        return self.parse_element(tree.getroot())

    def parse_string(self, content: str) -> List[TestCaseResult]:
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise ReportParseError(f"Failed to parse test report: {e}", cause=e)
        return self.parse_element(root)

    def parse_element(self, root: ET.Element) -> List[TestCaseResult]:
        return [self._parse_test_case(case_elem) for case_elem in root.iter("testcase")]

    def _parse_test_case(self, case_elem: ET.Element) -> TestCaseResult:
        failure = self._first_failure(case_elem)
        passed = failure is None

        error_output: Optional[str] = None
        if failure is not None:
            error_output = self._failure_message(failure)

        system_out = case_elem.findtext("system-out")
        if system_out and system_out.strip():
            output = system_out.strip()
        else:
            output = PASSED_OUTPUT if passed else FAILED_OUTPUT

        return TestCaseResult(
            test_name=case_elem.get("name", "unknown"),
            passed=passed,
            output=output,
            error_output=error_output,
            duration_ms=self._duration_ms(case_elem.get("time")),
        )

    def _first_failure(self, case_elem: ET.Element) -> Optional[ET.Element]:
        for child in case_elem:
            if child.tag in FAILURE_TAGS:
                return child
        return None

    def _failure_message(self, failure: ET.Element) -> str:
        message = failure.get("message")
        if message and message.strip():
            return message.strip()
        text = "".join(failure.itertext()).strip()
        return text or FAILED_OUTPUT

    def _duration_ms(self, time_str: Optional[str]) -> Optional[int]:
        if not time_str:
            return None
        try:
            return seconds_to_millis(float(time_str.replace(",", "")))
        except ValueError:
            return None
