"""Tests for array, tuple, set, map and record validators."""

from dataknobs_validate import ErrorKind, v


class TestArrayValidator:
    """Test array validation."""

    def test_valid_array(self):
        """Test elements are validated and a list is returned."""
        assert v.array(v.number()).parse((1, 2, 3)) == [1, 2, 3]

    def test_not_an_array(self):
        """Test the kind check."""
        issue = v.array(v.number()).safe_parse("123").error.first_issue
        assert issue.code is ErrorKind.INVALID_KIND
        assert issue.message == "Invalid array"

    def test_fail_fast_with_index_path(self):
        """Test only the first failing element is reported."""
        result = v.array(v.number()).safe_parse([1, "x", 3])
        assert result.success is False
        assert len(result.issues) == 1
        assert result.issues[0].path == (1,)

    def test_length_checks_run_before_elements(self):
        """Test a length failure wins over an element failure."""
        result = v.array(v.number()).min(3).safe_parse(["x"])
        issue = result.error.first_issue
        assert issue.code is ErrorKind.RANGE_VIOLATION
        assert issue.message == "Array must have at least 3 items"
        assert issue.path == ()

    def test_length_builders(self):
        """Test max, length and nonempty."""
        assert not v.array(v.any()).max(1).is_valid([1, 2])
        assert v.array(v.any()).length(2).is_valid([1, 2])
        assert v.array(v.any()).nonempty().safe_parse([]).error.first_issue.message == (
            "Array must not be empty"
        )

    def test_unique(self):
        """Test structural uniqueness ignores mapping key order."""
        schema = v.array(v.any()).unique()
        assert schema.is_valid([1, 2, 3])
        assert not schema.is_valid([1, 1])
        assert not schema.is_valid([{"a": 1, "b": 2}, {"b": 2, "a": 1}])
        issue = schema.safe_parse([1, 1]).error.first_issue
        assert issue.code is ErrorKind.NOT_UNIQUE

    def test_unique_with_cycles(self):
        """Test cyclic items do not recurse forever."""
        first = []
        first.append(first)
        second = []
        second.append(second)
        assert not v.array(v.any()).unique().is_valid([first, second])

    def test_element_outputs_are_used(self):
        """Test element transforms flow into the output."""
        schema = v.array(v.string().trim())
        assert schema.parse([" a ", "b "]) == ["a", "b"]

    def test_method_form(self):
        """Test validator.array()."""
        assert v.number().array().parse([1]) == [1]


class TestTupleValidator:
    """Test tuple validation."""

    def test_valid_tuple(self):
        """Test each position uses its own validator."""
        schema = v.tuple(v.string(), v.number())
        assert schema.parse(["a", 1]) == ("a", 1)

    def test_arity_mismatch(self):
        """Test wrong length reports TUPLE_LENGTH."""
        issue = v.tuple(v.string(), v.number()).safe_parse(["a"]).error.first_issue
        assert issue.code is ErrorKind.TUPLE_LENGTH
        assert issue.params["expected"] == 2
        assert issue.params["received"] == 1

    def test_position_path(self):
        """Test the failing position is the path."""
        result = v.tuple(v.string(), v.number()).safe_parse(["a", "b"])
        assert result.issues[0].path == (1,)


class TestSetValidator:
    """Test set validation."""

    def test_valid_set(self):
        """Test members are validated."""
        assert v.set(v.number()).parse({1, 2}) == {1, 2}

    def test_member_failure_has_no_path(self):
        """Test sets report failures at their own path."""
        result = v.set(v.number()).safe_parse({1, "a"})
        assert result.issues[0].path == ()

    def test_size_checks(self):
        """Test min, max and size."""
        assert not v.set(v.any()).min(2).is_valid({1})
        assert v.set(v.any()).size(1).is_valid({1})
        assert not v.set(v.any()).is_valid([1])

    def test_unhashable_member_output(self):
        """Test a member transformed into an unhashable value fails cleanly."""
        schema = v.set(v.string().transform(lambda s: [s]))
        issue = schema.safe_parse({"a"}).error.first_issue
        assert issue.code is ErrorKind.INVALID_VALUE
        assert issue.params["check"] == "unhashable"
        assert issue.message == "Value of type array cannot be a set member or mapping key"


class TestMapAndRecord:
    """Test map and record validation."""

    def test_map(self):
        """Test keys and values are validated."""
        schema = v.map(v.number(), v.string())
        assert schema.parse({1: "a"}) == {1: "a"}
        result = schema.safe_parse({1: 2})
        assert result.issues[0].path == (1,)
        assert not schema.is_valid({"a": "b"})

    def test_record_values(self):
        """Test single-argument records validate values with string keys."""
        schema = v.record(v.number())
        assert schema.parse({"a": 1, "b": 2}) == {"a": 1, "b": 2}
        result = schema.safe_parse({"a": 1, "b": "x"})
        assert result.issues[0].path == ("b",)
        assert not schema.is_valid({1: 1})

    def test_record_keys(self):
        """Test two-argument records validate keys too."""
        schema = v.record(v.string().min(2), v.boolean())
        assert schema.is_valid({"ok": True})
        assert schema.safe_parse({"x": True}).issues[0].path == ("x",)

    def test_record_kind(self):
        """Test non-mappings are rejected."""
        assert v.record(v.any()).safe_parse([]).error.first_issue.message == "Invalid record"

    def test_unhashable_key_output(self):
        """Test a key transformed into an unhashable value fails at that key."""
        schema = v.map(v.string().transform(lambda s: {s}), v.number())
        issue = schema.safe_parse({"a": 1}).error.first_issue
        assert issue.code is ErrorKind.INVALID_VALUE
        assert issue.params["check"] == "unhashable"
        assert issue.path == ("a",)

    def test_enum_keys_are_exhaustive(self):
        """Test every key of an enum key validator is required."""
        schema = v.record(v.enum("id", "name"), v.string())
        assert schema.parse({"id": "1", "name": "x"}) == {"id": "1", "name": "x"}
        result = schema.safe_parse({"id": "1"})
        assert result.issues[0].path == ("name",)
        assert result.issues[0].code is ErrorKind.INVALID_KIND

    def test_exhaustive_keys_with_optional_values(self):
        """Test missing keys are allowed and omitted when values are optional."""
        schema = v.record(v.literal("a"), v.number().optional())
        assert schema.parse({}) == {}
        filled = v.record(v.literal("a"), v.number().default(0))
        assert filled.parse({}) == {"a": 0}

    def test_partial_record(self):
        """Test partial records do not require every enum key."""
        schema = v.partial_record(v.enum("id", "name"), v.string())
        assert schema.parse({"id": "1"}) == {"id": "1"}
        assert not schema.is_valid({"other": "x"})
        assert v.record(v.enum("a", "b"), v.number()).partial().is_valid({})

    def test_loose_record(self):
        """Test loose records pass entries with unrecognized keys through."""
        schema = v.loose_record(v.string().regex(r"^S_"), v.number())
        assert schema.parse({"S_a": 1, "other": "x"}) == {"S_a": 1, "other": "x"}
        result = schema.safe_parse({"S_a": "y"})
        assert result.issues[0].path == ("S_a",)
