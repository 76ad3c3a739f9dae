"""Unit tests for interface schema validation."""

import abc
from typing import Annotated, NoReturn

import pytest

from nullguard import CanBeNull, NeverNull, null_safe
from nullguard.contracts import ParameterKind
from nullguard.errors import (
    DefinitionError,
    DuplicateNullabilityError,
    IneligibleNullabilityError,
    NotAnInterfaceError,
    NotNullSafeError,
)
from nullguard.validator import qualified_name, validate
from tests.fixtures import interfaces as ifaces

# pylint: disable=missing-function-docstring, too-few-public-methods


# ============================================================================
#                               Eligibility
# ============================================================================


class TestEligibility:
    """Which types may be validated at all."""

    @staticmethod
    @pytest.mark.parametrize("target", [42, "IFoo", None, ifaces.CorrectImplementation()])
    def test_non_classes_are_rejected(target):
        with pytest.raises(NotAnInterfaceError):
            validate(target)

    @staticmethod
    def test_concrete_class_is_rejected():
        with pytest.raises(NotAnInterfaceError) as excinfo:
            validate(ifaces.NotInterface)
        assert "is not an abstract base class or protocol" in str(excinfo.value)

    @staticmethod
    def test_concrete_member_is_rejected():
        with pytest.raises(NotAnInterfaceError) as excinfo:
            validate(ifaces.PartiallyAbstract)
        assert "'describe'" in str(excinfo.value)

    @staticmethod
    def test_implementation_is_rejected():
        """A class implementing an interface is not an interface itself."""
        with pytest.raises(NotAnInterfaceError):
            validate(ifaces.CorrectImplementation)

    @staticmethod
    def test_concrete_base_is_rejected():
        class Mixin:
            pass

        @null_safe
        class WithMixin(Mixin, abc.ABC):
            @abc.abstractmethod
            def name(self) -> str: ...

        with pytest.raises(NotAnInterfaceError) as excinfo:
            validate(WithMixin)
        assert "inherits from the concrete class" in str(excinfo.value)

    @staticmethod
    def test_abstract_static_member_is_rejected():
        @null_safe
        class WithStatic(abc.ABC):
            @staticmethod
            @abc.abstractmethod
            def create() -> str: ...

        with pytest.raises(NotAnInterfaceError):
            validate(WithStatic)

    @staticmethod
    def test_missing_marker_is_rejected():
        with pytest.raises(NotNullSafeError):
            validate(ifaces.NoMarkerInterface)

    @staticmethod
    def test_marker_is_not_inherited():
        with pytest.raises(NotNullSafeError):
            validate(ifaces.Unmarked)

    @staticmethod
    def test_unresolvable_annotation_is_a_definition_error():
        @null_safe
        class Broken(abc.ABC):
            @abc.abstractmethod
            def find(self, key: "DoesNotExist") -> str: ...  # noqa: F821

        with pytest.raises(DefinitionError) as excinfo:
            validate(Broken)
        assert "Cannot resolve the annotations" in str(excinfo.value)


# ============================================================================
#                          Ill-formed declarations
# ============================================================================


@pytest.mark.parametrize(
    ("interface", "error"),
    [
        (ifaces.DuplicateMarkerInterface, DuplicateNullabilityError),
        (ifaces.PropertyAndAccessorMarkerInterface, DuplicateNullabilityError),
        (ifaces.DuplicateArgumentMarkerInterface, DuplicateNullabilityError),
        (ifaces.DuplicateReturnMarkerInterface, DuplicateNullabilityError),
        (ifaces.MarkedVoidInterface, IneligibleNullabilityError),
        (ifaces.MarkedNoneArgumentInterface, IneligibleNullabilityError),
    ],
)
def test_ill_formed_interfaces(interface, error):
    with pytest.raises(error) as excinfo:
        validate(interface)
    assert excinfo.value.interface == qualified_name(interface)


def test_marker_on_never_returning_member():
    @null_safe
    class Failing(abc.ABC):
        @abc.abstractmethod
        @CanBeNull
        def fail(self) -> NoReturn: ...

    with pytest.raises(IneligibleNullabilityError) as excinfo:
        validate(Failing)
    assert excinfo.value.reason == "the member never returns"


def test_conflicting_indexer_key_markers():
    @null_safe
    class Conflicting(abc.ABC):
        @abc.abstractmethod
        def __getitem__(self, key: Annotated[str, NeverNull]) -> str: ...

        @abc.abstractmethod
        def __setitem__(self, key: Annotated[str, CanBeNull], value: str) -> None: ...

    with pytest.raises(DuplicateNullabilityError):
        validate(Conflicting)


def test_indexer_with_two_key_arguments():
    @null_safe
    class TwoKeys(abc.ABC):
        @abc.abstractmethod
        def __getitem__(self, row: int, col: int) -> str: ...

    with pytest.raises(DefinitionError):
        validate(TwoKeys)


# ============================================================================
#                            Resolved contracts
# ============================================================================


class TestCorrectInterfaceContract:
    """The contract built for the reference interface."""

    @staticmethod
    @pytest.fixture(scope="class")
    def contract():
        return validate(ifaces.CorrectInterface)

    @staticmethod
    def test_identity(contract):
        assert contract.interface is ifaces.CorrectInterface
        assert contract.name == "tests.fixtures.interfaces.CorrectInterface"
        assert contract.member_count == 4

    @staticmethod
    def test_property_level_marker(contract):
        name = contract.member("name")
        assert name.readable and not name.writable
        assert not name.getter_allows_none

    @staticmethod
    def test_accessor_level_markers_resolve_independently(contract):
        description = contract.member("description")
        assert description.readable and description.writable
        assert description.getter_allows_none
        assert not description.setter_allows_none

    @staticmethod
    def test_nullable_property(contract):
        assert contract.member("icon_url").getter_allows_none

    @staticmethod
    def test_method_parameters(contract):
        to_xml = contract.member("to_xml")
        assert [p.name for p in to_xml.parameters] == ["xml_version", "errors"]
        xml_version, errors = to_xml.parameters
        assert xml_version.kind is ParameterKind.INPUT
        assert not xml_version.allows_none
        assert errors.kind is ParameterKind.OUTPUT
        assert not errors.allows_none
        assert to_xml.returns_value
        assert not to_xml.return_allows_none


def test_unmarked_positions_default_to_never_null():
    @null_safe
    class Plain(abc.ABC):
        @property
        @abc.abstractmethod
        def value(self) -> str: ...

        @value.setter
        @abc.abstractmethod
        def value(self, value: str) -> None: ...

        @abc.abstractmethod
        def find(self, key) -> str: ...

    contract = validate(Plain)
    value = contract.member("value")
    assert not value.getter_allows_none
    assert not value.setter_allows_none
    find = contract.member("find")
    assert find.returns_value
    assert not find.return_allows_none
    assert not find.parameters[0].allows_none


def test_setter_value_annotation_marker():
    """A marker on the setter's value parameter marks the setter position."""

    @null_safe
    class Settable(abc.ABC):
        @property
        @abc.abstractmethod
        def value(self) -> str: ...

        @value.setter
        @abc.abstractmethod
        def value(self, value: Annotated[str | None, CanBeNull]) -> None: ...

    assert validate(Settable).member("value").setter_allows_none


def test_void_members_carry_no_return_contract():
    contract = validate(ifaces.Registry)
    clear = contract.member("clear")
    assert not clear.returns_value
    assert clear.return_allows_none


def test_parameter_kinds():
    contract = validate(ifaces.Registry)
    register = contract.member("register")
    assert [p.kind for p in register.parameters] == [
        ParameterKind.VAR_POSITIONAL,
        ParameterKind.VAR_KEYWORD,
    ]
    (slot,) = contract.member("swap").parameters
    assert slot.kind is ParameterKind.REF
    assert not slot.allows_none
    lookup = contract.member("lookup")
    assert [p.allows_none for p in lookup.parameters] == [False, True]
    assert lookup.return_allows_none


def test_indexer_contract():
    indexer = validate(ifaces.Grid).indexer
    assert indexer.readable and indexer.writable and indexer.deletable
    assert indexer.getter_allows_none
    assert not indexer.setter_allows_none
    assert [(k.label, k.allows_none) for k in indexer.keys] == [
        ("key", False),
        ("key[0]", False),
        ("key[1]", True),
    ]


def test_inherited_interface_members():
    contract = validate(ifaces.Labelled)
    assert {m.name for m in contract.methods} == {"name", "label"}


def test_protocol_interface():
    contract = validate(ifaces.Clock)
    assert contract.member("now").returns_value
    zone = contract.member("zone")
    assert zone.readable and not zone.getter_allows_none


def test_private_concrete_helpers_are_ignored():
    @null_safe
    class WithHelper(abc.ABC):
        @abc.abstractmethod
        def name(self) -> str: ...

        def _helper(self) -> str:
            return "helper"

    assert [m.name for m in validate(WithHelper).methods] == ["name"]


def test_unannotated_return_is_a_definition_error():
    """A bare ``def reset(self)`` would otherwise fail on every call."""

    @null_safe
    class Service(abc.ABC):
        @abc.abstractmethod
        def reset(self): ...

    with pytest.raises(DefinitionError) as excinfo:
        validate(Service)
    assert "Service.reset has no return annotation" in str(excinfo.value)


def test_marked_unannotated_return():
    @null_safe
    class Service(abc.ABC):
        @abc.abstractmethod
        @CanBeNull
        def current(self): ...

    current = validate(Service).member("current")
    assert current.returns_value
    assert current.return_allows_none
