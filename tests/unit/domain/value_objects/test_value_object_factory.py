"""Unit tests for the value object factory."""

import functools
from dataclasses import FrozenInstanceError
from decimal import Decimal
from typing import Annotated

import pytest
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from domainkit import ConfigurationError, Schema, ValidationError, value_object


def _no_methods(factory):
    return {}


class TestValueObjectConfiguration:
    """Test factory construction arguments."""

    def test_empty_name_raises_error(self):
        """Test an empty name is rejected."""
        with pytest.raises(ConfigurationError):
            value_object(name="", schema=str, methods_factory=_no_methods)

    def test_missing_schema_raises_error(self):
        """Test a missing schema is rejected."""
        with pytest.raises(ConfigurationError):
            value_object(name="Name", schema=None, methods_factory=_no_methods)

    def test_non_callable_methods_factory_raises_error(self):
        """Test a non-callable methods factory is rejected."""
        with pytest.raises(ConfigurationError):
            value_object(name="Name", schema=str, methods_factory={})  # type: ignore

    def test_non_callable_method_raises_error(self):
        """Test methods must be callable."""
        with pytest.raises(ConfigurationError):
            value_object(
                name="Name",
                schema=str,
                methods_factory=lambda factory: {"shout": "not callable"},
            )

    def test_reserved_method_name_raises_error(self):
        """Test private attribute names cannot be used as methods."""
        with pytest.raises(ConfigurationError):
            value_object(
                name="Name",
                schema=str,
                methods_factory=lambda factory: {"_fields": lambda self: None},
            )

    def test_configuration_error_is_not_validation_error(self):
        """Test configuration and validation failures are distinct."""
        with pytest.raises(ConfigurationError) as exc_info:
            value_object(name="", schema=str, methods_factory=_no_methods)
        assert not isinstance(exc_info.value, ValidationError)
        assert exc_info.value.code == "CONFIGURATION_ERROR"


class TestPrimitiveDetection:
    """Test primitive wrapper classification."""

    @pytest.mark.parametrize(
        "schema",
        [str, int, float, Decimal, bool, Annotated[str, Field(min_length=2)], int | float],
    )
    def test_primitive_schemas(self, schema):
        """Test string, number and boolean schemas are primitive."""
        factory = value_object(name="Primitive", schema=schema, methods_factory=_no_methods)
        assert factory.is_primitive is True

    def test_object_schema_is_not_primitive(self, point_factory):
        """Test object schemas are not primitive."""
        assert point_factory.is_primitive is False

    def test_list_schema_is_not_primitive(self):
        """Test collection schemas are not primitive."""
        factory = value_object(name="Tags", schema=list[str], methods_factory=_no_methods)
        assert factory.is_primitive is False

    def test_override_is_primitive(self):
        """Test primitive semantics can be forced."""
        factory = value_object(
            name="Wrapped",
            schema=Schema.object("Wrapped", value=str),
            methods_factory=_no_methods,
            override_is_primitive=True,
        )
        wrapped = factory.create({"value": "abc"})

        assert factory.is_primitive is True
        assert wrapped.value_of() == "abc"
        assert str(wrapped) == "abc"

    def test_override_is_primitive_without_value_field(self):
        """Test forced primitives over an object schema unwrap to all fields."""
        price = value_object(
            name="Price",
            schema=Schema.object("Price", amount=int, currency=str),
            methods_factory=_no_methods,
            override_is_primitive=True,
        )
        first = price.create({"amount": 1, "currency": "USD"})
        second = price.create({"amount": 1, "currency": "USD"})

        assert first.value_of() == {"amount": 1, "currency": "USD"}
        assert first.to_string() == 'Price({"amount":1,"currency":"USD"})'
        assert first.equals(second)
        assert not first.equals(price.create({"amount": 2, "currency": "USD"}))
        assert hash(first) == hash(second)
        assert price.create(first.value_of()).equals(first)


class TestValueObjectCreation:
    """Test value object creation."""

    def test_create_composite(self, point_factory):
        """Test fields are exposed as attributes."""
        point = point_factory.create({"x": 1, "y": 2})
        assert point.x == 1
        assert point.y == 2
        assert point.to_dict() == {"x": 1, "y": 2}

    def test_create_primitive(self, name_factory):
        """Test primitive values are stored under value."""
        name = name_factory.create("Ada")
        assert name.value == "Ada"

    def test_create_coerces_input(self, point_factory):
        """Test schema coercion is applied."""
        point = point_factory.create({"x": "3", "y": 4})
        assert point.x == 3

    def test_create_from_value_object(self, point_factory):
        """Test an existing value object can be used as input."""
        point = point_factory.create({"x": 1, "y": 2})
        assert point_factory.create(point).equals(point)

    def test_invalid_data_raises_validation_error(self, point_factory):
        """Test invalid data raises ValidationError with details."""
        data = {"x": "not a number", "y": 2}

        with pytest.raises(ValidationError) as exc_info:
            point_factory.create(data)

        error = exc_info.value
        assert error.message.startswith("Invalid Point: x:")
        assert error.fields == ["x"]
        assert error.context == {"object_type": "Point", "input": data}
        assert isinstance(error.error, PydanticValidationError)
        assert error.__cause__ is error.error

    def test_missing_field_reported(self, point_factory):
        """Test missing fields are reported by path."""
        with pytest.raises(ValidationError) as exc_info:
            point_factory.create({"x": 1})
        assert exc_info.value.fields == ["y"]

    def test_unknown_attribute_raises_attribute_error(self, point_factory):
        """Test unknown fields are not silently None."""
        point = point_factory.create({"x": 1, "y": 2})
        with pytest.raises(AttributeError):
            point.z  # noqa: B018

    def test_instances_share_generated_type(self, point_factory):
        """Test every instance uses the factory's generated class."""
        point = point_factory.create({"x": 1, "y": 2})
        assert isinstance(point, point_factory.instance_type)
        assert type(point).__name__ == "Point"


class TestValueObjectImmutability:
    """Test value objects cannot be changed."""

    def test_assign_field_raises_error(self, point_factory):
        """Test assigning a field is rejected."""
        point = point_factory.create({"x": 1, "y": 2})
        with pytest.raises(FrozenInstanceError):
            point.x = 10
        assert point.x == 1

    def test_add_attribute_raises_error(self, point_factory):
        """Test adding an attribute is rejected."""
        point = point_factory.create({"x": 1, "y": 2})
        with pytest.raises(FrozenInstanceError):
            point.z = 3

    def test_delete_field_raises_error(self, point_factory):
        """Test deleting a field is rejected."""
        point = point_factory.create({"x": 1, "y": 2})
        with pytest.raises(FrozenInstanceError):
            del point.x
        assert point.x == 1

    def test_to_dict_is_a_copy(self, point_factory):
        """Test mutating to_dict() output leaves the instance unchanged."""
        point = point_factory.create({"x": 1, "y": 2})
        data = point.to_dict()
        data["x"] = 100
        assert point.x == 1

    def test_methods_return_new_instances(self, point_factory):
        """Test a change produces a new instance."""
        point = point_factory.create({"x": 1, "y": 2})
        moved = point.move(1, 1)
        assert moved is not point
        assert point.x == 1
        assert moved.x == 2


class TestValueOf:
    """Test value_of unwrapping."""

    def test_primitive_returns_value(self, name_factory):
        """Test primitive wrappers unwrap to the primitive."""
        assert name_factory.create("Ada").value_of() == "Ada"

    def test_single_scalar_field_returns_field(self):
        """Test objects with one scalar field unwrap to it."""
        code = value_object(
            name="Code",
            schema=Schema.object("Code", code=str),
            methods_factory=_no_methods,
        )
        assert code.create({"code": "X1"}).value_of() == "X1"

    def test_single_collection_field_returns_self(self):
        """Test objects with one non-scalar field do not unwrap."""
        tags = value_object(
            name="Tags",
            schema=Schema.object("Tags", tags=list[str]),
            methods_factory=_no_methods,
        )
        instance = tags.create({"tags": ["a"]})
        assert instance.value_of() is instance

    def test_multiple_fields_return_self(self, point_factory):
        """Test multi-field objects unwrap to themselves."""
        point = point_factory.create({"x": 1, "y": 2})
        assert point.value_of() is point

    def test_round_trip(self, name_factory):
        """Test re-creating from value_of gives an equal object."""
        name = name_factory.create("Ada")
        assert name_factory.create(name.value_of()).equals(name)


class TestValueObjectEquality:
    """Test structural equality."""

    def test_same_data_equal(self, point_factory):
        """Test objects built from the same data are equal."""
        first = point_factory.create({"x": 1, "y": 2})
        second = point_factory.create({"x": 1, "y": 2})
        assert first.equals(second)
        assert first == second
        assert first is not second

    def test_different_data_not_equal(self, point_factory):
        """Test objects differing in a field are not equal."""
        first = point_factory.create({"x": 1, "y": 2})
        second = point_factory.create({"x": 1, "y": 3})
        assert not first.equals(second)
        assert first != second

    def test_none_not_equal(self, point_factory):
        """Test comparing with None is False."""
        assert point_factory.create({"x": 1, "y": 2}).equals(None) is False

    def test_same_reference_equal(self, point_factory):
        """Test an object equals itself."""
        point = point_factory.create({"x": 1, "y": 2})
        assert point.equals(point)

    def test_plain_mapping_not_equal(self, point_factory):
        """Test a plain dict is not a value object."""
        point = point_factory.create({"x": 1, "y": 2})
        assert not point.equals({"x": 1, "y": 2})

    def test_different_field_sets_not_equal(self, point_factory):
        """Test objects with different field names are not equal."""
        other = value_object(
            name="Point3D",
            schema=Schema.object("Point3D", x=int, y=int, z=int),
            methods_factory=_no_methods,
        )
        point = point_factory.create({"x": 1, "y": 2})
        assert not point.equals(other.create({"x": 1, "y": 2, "z": 3}))

    def test_primitive_equals_raw_value(self, name_factory):
        """Test primitive wrappers compare with raw primitives."""
        assert name_factory.create("Ada").equals("Ada")
        assert not name_factory.create("Ada").equals("Bob")

    def test_primitive_equals_other_wrapper(self, name_factory):
        """Test primitive wrappers compare unwrapped values."""
        label = value_object(name="Label", schema=str, methods_factory=_no_methods)
        assert name_factory.create("Ada").equals(label.create("Ada"))

    def test_equal_objects_hash_equal(self, point_factory):
        """Test equal value objects can be used as set members."""
        first = point_factory.create({"x": 1, "y": 2})
        second = point_factory.create({"x": 1, "y": 2})
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_boolean_field_never_equals_number(self):
        """Test a True field does not equal a 1 field."""
        flagged = value_object(
            name="Flagged",
            schema=Schema.object("Flagged", flag=bool, n=int),
            methods_factory=_no_methods,
        )
        counted = value_object(
            name="Counted",
            schema=Schema.object("Counted", flag=int, n=int),
            methods_factory=_no_methods,
        )
        assert not flagged.create({"flag": True, "n": 0}).equals(
            counted.create({"flag": 1, "n": 0})
        )
        assert flagged.create({"flag": True, "n": 0}).equals(
            flagged.create({"flag": True, "n": 0})
        )

    def test_unhashable_fields_still_hashable(self):
        """Test objects holding lists can be set members."""
        tags = value_object(
            name="Tags",
            schema=Schema.object("Tags", tags=list[str], owner=str),
            methods_factory=_no_methods,
        )
        first = tags.create({"tags": ["a"], "owner": "x"})
        second = tags.create({"tags": ["a"], "owner": "x"})

        assert hash(first) == hash(second)
        assert len({first, second}) == 1
        assert len({first, tags.create({"tags": ["b"], "owner": "x"})}) == 2


class TestToString:
    """Test string rendering."""

    def test_primitive_to_string(self, name_factory):
        """Test primitives render as their value."""
        assert name_factory.create("Ada").to_string() == "Ada"
        assert str(name_factory.create("Ada")) == "Ada"

    def test_composite_to_string(self, point_factory):
        """Test composites render as Name(JSON)."""
        point = point_factory.create({"x": 1, "y": 2})
        assert point.to_string() == 'Point({"x":1,"y":2})'
        assert str(point) == 'Point({"x":1,"y":2})'

    def test_repr(self, point_factory):
        """Test repr lists the fields."""
        assert repr(point_factory.create({"x": 1, "y": 2})) == "Point(x=1, y=2)"


class TestCustomMethods:
    """Test methods produced by the methods factory."""

    def test_method_bound_to_instance(self, name_factory):
        """Test methods receive the instance."""
        assert name_factory.create("Ada").initial() == "A"

    def test_self_referential_method(self, point_factory):
        """Test methods can create new instances through the factory."""
        moved = point_factory.create({"x": 1, "y": 2}).move(1, 1)
        assert moved.equals(point_factory.create({"x": 2, "y": 3}))

    def test_methods_factory_receives_factory(self):
        """Test the methods factory gets the factory handle."""
        received = []

        def methods(factory):
            received.append(factory)
            return {}

        factory = value_object(name="Name", schema=str, methods_factory=methods)
        assert received == [factory]

    def test_custom_method_overrides_standard(self):
        """Test custom methods win over standard ones."""
        factory = value_object(
            name="Secret",
            schema=str,
            methods_factory=lambda factory: {"to_string": lambda self: "***"},
        )
        secret = factory.create("password")
        assert secret.to_string() == "***"
        assert str(secret) == "***"

    def test_non_function_callable_receives_instance(self, point_factory):
        """Test callables other than functions still get the instance."""

        def describe(label, point):
            return f"{label}:{point.x},{point.y}"

        factory = value_object(
            name="Point",
            schema=point_factory.schema,
            methods_factory=lambda factory: {"describe": functools.partial(describe, "P")},
        )
        assert factory.create({"x": 1, "y": 2}).describe() == "P:1,2"

    def test_methods_returning_none(self):
        """Test a methods factory may return None."""
        factory = value_object(name="Name", schema=str, methods_factory=lambda factory: None)
        assert factory.create("Ada").value == "Ada"


class TestValueObjectExtension:
    """Test factory extension."""

    def test_extend_requires_name(self, point_factory):
        """Test extending without a name is rejected."""
        with pytest.raises(ConfigurationError):
            point_factory.extend(name="", methods_factory=_no_methods)

    def test_extend_requires_methods_factory(self, point_factory):
        """Test extending without a methods factory is rejected."""
        with pytest.raises(ConfigurationError):
            point_factory.extend(name="Other", methods_factory=None)  # type: ignore

    def test_extend_requires_callable_schema_transformer(self, point_factory):
        """Test the schema transformer must be callable."""
        with pytest.raises(ConfigurationError):
            point_factory.extend(
                name="Other", methods_factory=_no_methods, schema="Point"  # type: ignore[arg-type]
            )

    def test_extend_inherits_schema_and_methods(self, point_factory):
        """Test extended factories keep the parent's schema and methods."""
        child = point_factory.extend(
            name="NamedPoint",
            methods_factory=lambda factory: {"sum": lambda self: self.x + self.y},
        )
        point = child.create({"x": 1, "y": 2})

        assert child.name == "NamedPoint"
        assert child.schema is point_factory.schema
        assert point.sum() == 3
        assert point.move(1, 1).x == 2

    def test_child_method_overrides_parent(self, point_factory):
        """Test child methods win on name collision."""
        child = point_factory.extend(
            name="FrozenPoint",
            methods_factory=lambda factory: {"move": lambda self, dx, dy: self},
        )
        point = child.create({"x": 1, "y": 2})
        assert point.move(5, 5) is point

    def test_extend_transforms_schema(self, point_factory):
        """Test the schema transformer derives a new schema."""
        child = point_factory.extend(
            name="Point3D",
            schema=lambda base: base.extend(z=(int, 0)),
            methods_factory=_no_methods,
        )

        assert child.create({"x": 1, "y": 2, "z": 3}).z == 3
        assert not hasattr(point_factory.create({"x": 1, "y": 2, "z": 3}), "z")

    def test_extension_does_not_change_parent(self, point_factory):
        """Test the parent accepts the same inputs and keeps its methods."""
        child = point_factory.extend(
            name="PositivePoint",
            schema=lambda base: base.refine(lambda p: p.x > 0, "x must be positive"),
            methods_factory=lambda factory: {"norm": lambda self: abs(self.x) + abs(self.y)},
        )

        with pytest.raises(ValidationError):
            child.create({"x": -1, "y": 2})

        parent_point = point_factory.create({"x": -1, "y": 2})
        assert parent_point.x == -1
        assert not hasattr(parent_point, "norm")

    def test_extend_keeps_primitive_override(self):
        """Test the primitive override is inherited."""
        parent = value_object(
            name="Wrapped",
            schema=Schema.object("Wrapped", value=str),
            methods_factory=_no_methods,
            override_is_primitive=True,
        )
        child = parent.extend(name="Child", methods_factory=_no_methods)
        assert child.is_primitive is True

    def test_extend_twice(self, name_factory):
        """Test extended factories can be extended again."""
        short = name_factory.extend(
            name="ShortName",
            schema=lambda base: base.constrain(max_length=3),
            methods_factory=lambda factory: {"shout": lambda self: self.value + "!"},
        )
        short_upper = short.extend(
            name="ShortUpperName",
            schema=lambda base: base.refine(str.isupper, "Must be upper case"),
            methods_factory=_no_methods,
        )

        value = short_upper.create("ADA")
        assert value.shout() == "ADA!"
        assert value.initial() == "A"
        with pytest.raises(ValidationError):
            short_upper.create("ADAM")
        with pytest.raises(ValidationError):
            short_upper.create("ada")
        assert short.create("ada").value == "ada"
