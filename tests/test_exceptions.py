import pytest

from pykeyx import exceptions
from pykeyx.exceptions import (
    AlreadyRegisteredError,
    ConfigurationError,
    CryptographicError,
    ErrorKind,
    InvalidArgumentError,
    KeyMaterialError,
    PyKeyXError,
    SecurityError,
)

_ABSTRACT = {
    PyKeyXError,
    ConfigurationError,
    AlreadyRegisteredError,
    SecurityError,
    KeyMaterialError,
    CryptographicError,
}


def _concrete_errors() -> list[type[PyKeyXError]]:
    return [
        obj
        for obj in vars(exceptions).values()
        if isinstance(obj, type) and issubclass(obj, PyKeyXError) and obj not in _ABSTRACT
    ]


def test_every_kind_has_exactly_one_error() -> None:
    kinds = [error.kind for error in _concrete_errors()]
    assert sorted(kinds) == sorted(ErrorKind)


@pytest.mark.parametrize("error", _concrete_errors(), ids=lambda e: e.__name__)
def test_errors_carry_their_kind(error: type[PyKeyXError]) -> None:
    raised = error("boom")
    assert raised.kind in ErrorKind
    assert str(raised) == "boom"
    assert isinstance(raised, (ConfigurationError, SecurityError))


def test_invalid_argument_is_value_error() -> None:
    assert issubclass(InvalidArgumentError, ValueError)
