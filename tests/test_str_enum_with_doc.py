from enum import unique

import pytest

from vax import EdgeDirection, UnmatchedPolicy
from vax._str_enum_with_doc import StrEnumWithDoc


class Mode(StrEnumWithDoc):
    STRICT = "strict", "Reject anything unexpected"
    LENIENT = "lenient", "Accept and warn"
    QUIET = "quiet"  # No docstring provided


def test_enum_value() -> None:
    assert Mode.STRICT.value == "strict"
    assert Mode.QUIET.value == "quiet"


def test_enum_docstring() -> None:
    assert Mode.STRICT.__doc__ == "Reject anything unexpected"
    assert Mode.QUIET.__doc__ == ""


def test_enum_is_str() -> None:
    assert isinstance(Mode.STRICT, str)
    assert Mode.STRICT == "strict"
    assert f"{Mode.LENIENT}" == "lenient"


def test_enum_by_value() -> None:
    assert Mode("strict") is Mode.STRICT


def test_describe() -> None:
    assert Mode.describe() == "strict: Reject anything unexpected\nlenient: Accept and warn\nquiet: "


@pytest.mark.parametrize(
    ("member", "expected_value"),
    [
        (UnmatchedPolicy.WARN, "warn"),
        (UnmatchedPolicy.DROP, "drop"),
        (UnmatchedPolicy.RAISE, "raise"),
        (EdgeDirection.AS_CONSUMER, "consumer"),
        (EdgeDirection.AS_PRODUCER, "producer"),
        (EdgeDirection.EITHER, "either"),
    ],
)
def test_library_enums(member: StrEnumWithDoc, expected_value: str) -> None:
    assert member.value == expected_value
    assert member.__doc__


def test_unique_decorator_rejects_duplicate_values_with_different_docs() -> None:
    """Ensure @unique considers only values, not docstrings."""
    with pytest.raises(ValueError, match="duplicate values"):

        @unique
        class DuplicateMode(StrEnumWithDoc):
            NORMAL = "same_value", "First docstring"
            DUPLICATE = "same_value", "Different docstring"
