"""Best-effort extraction of facts from generated source text.

These are lossy heuristics over free text, not parsers: the class name is
the first ``class <Name>`` occurrence (comments and strings included) and
the test count is the number of xUnit ``[Fact]`` / NUnit ``[Test]``
attribute tokens.
"""

import re

DEFAULT_CLASS_NAME = "ComplianceGovernor"

CLASS_NAME_PATTERN = re.compile(r"class\s+(\w+)")
TEST_ANNOTATION_PATTERN = re.compile(r"\[Fact\]|\[Test\]")


def extract_class_name(code: str, fallback: str = DEFAULT_CLASS_NAME) -> str:
    """Return the first declared class name in ``code``, or ``fallback``."""
    match = CLASS_NAME_PATTERN.search(code)
    return match.group(1) if match else fallback


def count_test_annotations(test_code: str) -> int:
    """Count test-method annotations in generated test code."""
    return len(TEST_ANNOTATION_PATTERN.findall(test_code))
