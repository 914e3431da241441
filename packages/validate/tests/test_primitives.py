"""Tests for primitive validators and checks."""

import datetime
import enum
import math

import pytest

from dataknobs_validate import (
    UNDEFINED,
    ErrorKind,
    SchemaDefinitionError,
    Symbol,
    ValidationError,
    v,
)


class TestStringValidator:
    """Test string kind checks, checks and transforms."""

    def test_accepts_strings(self):
        """Test that plain strings pass through."""
        assert v.string().parse("hello") == "hello"

    def test_rejects_other_kinds(self):
        """Test that non-strings fail with INVALID_KIND."""
        result = v.string().safe_parse(42)
        assert result.success is False
        issue = result.error.first_issue
        assert issue.code is ErrorKind.INVALID_KIND
        assert issue.message == "Invalid string"
        assert issue.params["received"] == "number"

    def test_min_and_max(self):
        """Test length bounds and their messages."""
        schema = v.string().min(3).max(5)
        assert schema.parse("abcd") == "abcd"

        short = schema.safe_parse("ab")
        assert short.error.first_issue.code is ErrorKind.RANGE_VIOLATION
        assert short.error.first_issue.message == "String must be at least 3 characters"

        long = schema.safe_parse("abcdef")
        assert long.error.first_issue.message == "String must be at most 5 characters"

    def test_first_failing_check_wins(self):
        """Test that checks short-circuit in chain order."""
        schema = v.string().min(10).email()
        issues = schema.safe_parse("bad").issues
        assert len(issues) == 1
        assert issues[0].params["check"] == "min"

    def test_length_and_nonempty(self):
        """Test exact length and nonempty."""
        assert v.string().length(2).is_valid("ab")
        result = v.string().length(2).safe_parse("abc")
        assert result.error.first_issue.message == "String must be exactly 2 characters"
        assert not v.string().nonempty().is_valid("")

    def test_formats(self):
        """Test email, url, uuid and ip formats."""
        assert v.string().email().is_valid("ada@example.com")
        assert not v.string().email().is_valid("ada@example")
        assert v.string().url().is_valid("https://example.com/path?q=1")
        assert not v.string().url().is_valid("example.com")
        assert v.string().uuid().is_valid("123e4567-e89b-12d3-a456-426614174000")
        assert not v.string().uuid().is_valid("123e4567")
        assert v.string().ipv4().is_valid("192.168.0.1")
        assert not v.string().ipv4().is_valid("::1")
        assert v.string().ipv6().is_valid("::1")
        assert v.string().ip().is_valid("10.0.0.1")
        assert not v.string().ip().is_valid("999.1.1.1")

    def test_format_messages(self):
        """Test that format checks report FORMAT_VIOLATION."""
        issue = v.email().safe_parse("nope").error.first_issue
        assert issue.code is ErrorKind.FORMAT_VIOLATION
        assert issue.message == "Invalid email address"

    def test_substring_checks(self):
        """Test starts_with, ends_with and includes."""
        schema = v.string().starts_with("ab").ends_with("yz").includes("mm")
        assert schema.is_valid("abmmyz")
        result = schema.safe_parse("xxmmyz")
        assert result.error.first_issue.message == 'String must start with "ab"'

    def test_regex(self):
        """Test regex search semantics."""
        schema = v.string().regex(r"^[a-z]+$")
        assert schema.is_valid("abc")
        assert schema.safe_parse("ab1").error.first_issue.message == "Invalid format"

    def test_transforms_run_before_checks(self):
        """Test that trim applies before the length check."""
        schema = v.string().trim().min(3)
        assert schema.parse("  abc  ") == "abc"
        assert not schema.is_valid("  a  ")

    def test_case_transforms(self):
        """Test to_lower and to_upper."""
        assert v.string().to_lower().parse("AbC") == "abc"
        assert v.string().to_upper().parse("AbC") == "ABC"

    def test_datetime_format(self):
        """Test the ISO datetime string check."""
        schema = v.string().datetime()
        assert schema.is_valid("2024-01-02T03:04:05Z")
        assert not schema.is_valid("2024-01-02")
        assert not schema.is_valid("not a date")

    def test_custom_message(self):
        """Test per-check and kind-check message overrides."""
        assert v.string("need text").safe_parse(1).error.first_issue.message == "need text"
        assert v.string().min(2, "too short").safe_parse("a").error.first_issue.message == "too short"

    def test_immutability(self):
        """Test that builders never modify the receiver."""
        base = v.string()
        longer = base.min(5)
        assert base.is_valid("ab")
        assert not longer.is_valid("ab")
        assert base.checks == ()


class TestNumberValidator:
    """Test number kind checks and numeric checks."""

    def test_accepts_ints_and_floats(self):
        """Test ints and floats pass."""
        assert v.number().parse(3) == 3
        assert v.number().parse(2.5) == 2.5

    def test_rejects_bool_and_nan(self):
        """Test booleans and NaN are not numbers."""
        assert not v.number().is_valid(True)
        assert not v.number().is_valid(math.nan)
        assert v.number().safe_parse("1").error.first_issue.message == "Invalid number"

    def test_negative_zero_and_infinity(self):
        """Test that -0.0 and infinities pass the kind check."""
        assert v.number().is_valid(-0.0)
        assert v.number().is_valid(math.inf)
        assert not v.number().finite().is_valid(math.inf)

    def test_bounds(self):
        """Test min, max, gt and lt."""
        schema = v.number().min(1).max(10)
        assert schema.is_valid(1)
        assert schema.is_valid(10)
        assert schema.safe_parse(0).error.first_issue.message == "Number must be at least 1"
        assert schema.safe_parse(11).error.first_issue.message == "Number must be at most 10"
        assert not v.number().gt(1).is_valid(1)
        assert not v.number().lt(1).is_valid(1)

    def test_int(self):
        """Test the integer check is reported as INVALID_KIND."""
        assert v.number().int().is_valid(4)
        assert v.number().int().is_valid(4.0)
        issue = v.int().safe_parse(4.5).error.first_issue
        assert issue.code is ErrorKind.INVALID_KIND
        assert issue.message == "Number must be an integer"

    def test_signs(self):
        """Test positive, negative, nonnegative and nonpositive."""
        assert not v.number().positive().is_valid(0)
        assert v.number().nonnegative().is_valid(0)
        assert not v.number().negative().is_valid(0)
        assert v.number().nonpositive().is_valid(0)
        assert v.number().positive().safe_parse(-1).error.first_issue.message == "Number must be positive"

    def test_safe(self):
        """Test the safe integer check."""
        assert v.number().safe().is_valid(2**53 - 1)
        assert not v.number().safe().is_valid(2**53)

    def test_multiple_of(self):
        """Test multiple_of, even and odd."""
        assert v.number().multiple_of(5).is_valid(15)
        issue = v.number().multiple_of(5).safe_parse(7).error.first_issue
        assert issue.code is ErrorKind.NOT_MULTIPLE_OF
        assert issue.message == "Number must be a multiple of 5"
        assert v.number().even().is_valid(4)
        assert v.number().odd().is_valid(3)
        assert not v.number().odd().is_valid(4)

    def test_multiple_of_uses_raw_float_remainder(self):
        """Test that float remainders are compared exactly."""
        assert v.number().step(0.5).is_valid(1.5)
        assert not v.number().multiple_of(0.1).is_valid(0.3)

    def test_multiple_of_rejects_infinities(self):
        """Test infinite values fail multiple_of, even and odd without raising."""
        for value in (math.inf, -math.inf):
            issue = v.number().multiple_of(2).safe_parse(value).error.first_issue
            assert issue.code is ErrorKind.NOT_MULTIPLE_OF
            assert not v.number().even().is_valid(value)
            assert not v.number().odd().is_valid(value)

    def test_multiple_of_huge_int_with_float_divisor(self):
        """Test an int too large for a float fails instead of overflowing."""
        assert not v.number().multiple_of(0.5).is_valid(10**400)
        assert v.number().multiple_of(7).is_valid(7 * 10**400)

    def test_odd_negative_and_float(self):
        """Test odd accepts negative and integral float values."""
        assert v.number().odd().is_valid(-3)
        assert v.number().odd().is_valid(3.0)
        assert v.number().odd().is_valid(-3.0)
        assert not v.number().odd().is_valid(3.5)

    def test_between(self):
        """Test between combines both bounds."""
        schema = v.number().between(1, 3)
        assert schema.is_valid(2)
        assert not schema.is_valid(4)


class TestOtherPrimitives:
    """Test the remaining primitive validators."""

    def test_boolean(self):
        """Test boolean accepts only bools."""
        assert v.boolean().parse(False) is False
        assert v.boolean().safe_parse(0).error.first_issue.message == "Invalid boolean"

    def test_bigint(self):
        """Test bigint accepts ints but not bools or floats."""
        assert v.bigint().parse(10**30) == 10**30
        assert not v.bigint().is_valid(True)
        assert not v.bigint().is_valid(1.0)
        assert not v.bigint().min(5).is_valid(4)
        assert v.bigint().multiple_of(3).is_valid(9)

    def test_date(self):
        """Test date kind and bounds, with naive dates treated as UTC."""
        start = datetime.datetime(2024, 1, 1)
        schema = v.date().min(start)
        assert schema.is_valid(datetime.datetime(2024, 6, 1, tzinfo=datetime.timezone.utc))
        assert not schema.is_valid(datetime.datetime(2023, 6, 1))
        assert v.date().safe_parse("2024-01-01").error.first_issue.message == "Invalid date"

    def test_bytes(self):
        """Test bytes accepts bytes and bytearray, returning bytes."""
        assert v.bytes().parse(bytearray(b"ab")) == b"ab"
        assert not v.bytes().max(1).is_valid(b"ab")
        assert not v.bytes().is_valid("ab")

    def test_symbol(self):
        """Test symbol accepts Symbol instances."""
        token = Symbol("id")
        assert v.symbol().parse(token) is token
        assert not v.symbol().is_valid("id")

    def test_literal_is_type_strict(self):
        """Test literal equality keeps booleans and numbers apart."""
        assert v.literal(1).is_valid(1)
        assert not v.literal(1).is_valid(True)
        assert not v.literal(True).is_valid(1)
        assert not v.literal("1").is_valid(1)
        issue = v.literal("a").safe_parse("b").error.first_issue
        assert issue.code is ErrorKind.INVALID_VALUE
        assert issue.message == "Expected a, got b"

    def test_enum(self):
        """Test enum membership, options, extract and exclude."""
        colors = v.enum("red", "green", "blue")
        assert colors.options == ["red", "green", "blue"]
        assert colors.parse("red") == "red"
        issue = colors.safe_parse("pink").error.first_issue
        assert issue.message == "Expected one of [red, green, blue], got pink"
        assert colors.extract("red").options == ["red"]
        assert colors.exclude("red").options == ["green", "blue"]
        assert v.enum(["a", "b"]).options == ["a", "b"]

    def test_enum_extract_unknown_value(self):
        """Test extracting a value that is not an option."""
        with pytest.raises(ValueError):
            v.enum("a").extract("b")

    def test_native_enum(self):
        """Test Python Enum classes, by member or by value."""

        class Color(enum.Enum):
            RED = "red"
            BLUE = "blue"

        schema = v.native_enum(Color)
        assert schema.parse("red") is Color.RED
        assert schema.parse(Color.BLUE) is Color.BLUE
        assert not schema.is_valid("green")

    def test_any_unknown_never(self):
        """Test any and unknown accept everything, never accepts nothing."""
        assert v.any().parse([1]) == [1]
        assert v.unknown().parse(None) is None
        assert v.never().safe_parse(1).error.first_issue.message == "Never type cannot be parsed"

    def test_null_undefined_void_nan(self):
        """Test the unit-kind validators."""
        assert v.null().parse(None) is None
        assert not v.null().is_valid(UNDEFINED)
        assert v.undefined().parse() is UNDEFINED
        assert v.undefined().safe_parse(None).error.first_issue.message == "Expected undefined"
        assert v.void().is_valid(UNDEFINED)
        assert v.nan().is_valid(math.nan)
        assert not v.nan().is_valid(1.0)


class TestParseEntryPoints:
    """Test parse, safe_parse, is_valid and parse_or_default."""

    def test_parse_raises(self):
        """Test that parse raises ValidationError with issues."""
        with pytest.raises(ValidationError) as exc_info:
            v.number().parse("x")
        assert exc_info.value.issues[0].code is ErrorKind.INVALID_KIND
        assert exc_info.value.context["issues"][0]["code"] == "invalid_kind"

    def test_safe_parse_is_deterministic(self):
        """Test that repeated calls yield equal outcomes."""
        schema = v.string().min(3)
        first = schema.safe_parse("ab")
        second = schema.safe_parse("ab")
        assert first.success == second.success
        assert first.issues == second.issues

    def test_result_truthiness_and_unwrap(self):
        """Test ParseResult helpers."""
        ok = v.number().safe_parse(1)
        assert ok
        assert ok.unwrap() == 1
        bad = v.number().safe_parse("1")
        assert not bad
        with pytest.raises(ValidationError):
            bad.unwrap()

    def test_parse_or_default(self):
        """Test the fallback is used and validated."""
        schema = v.number()
        assert schema.parse_or_default("x", 5) == 5
        assert schema.parse_or_default(3, 5) == 3
        with pytest.raises(ValidationError):
            schema.parse_or_default("x", "also bad")

    def test_apply(self):
        """Test apply passes the validator through a function."""
        schema = v.string().apply(lambda s: s.min(2))
        assert not schema.is_valid("a")


class TestStringFormats:
    """Test the named string formats."""

    @pytest.mark.parametrize(
        "schema, good, bad",
        [
            (v.hostname(), "api.example.com", "-bad.example.com"),
            (v.hostname(), "example.com", "localhost"),
            (v.emoji(), "\U0001F600", "a"),
            (v.emoji(), "\U0001F44D\U0001F3FD", "\U0001F600x"),
            (v.base64(), "aGVsbG8=", "aGVsbG8"),
            (v.base64url(), "aGVsbG8", "a+b"),
            (v.hex(), "deadBEEF", "xyz"),
            (v.jwt(), "eyJhbGciOiJIUzI1NiJ9.eyJzdWIiOiIxIn0.sig", "a.b"),
            (v.nanoid(), "V1StGXR8_Z5jdHi6B-myT", "V1StGXR8"),
            (v.cuid(), "cjld2cjxh0000qzrmn831i7rn", "xjld2cjxh"),
            (v.cuid2(), "tz4a98xxat96iws9zmbrgj3a", "ABC"),
            (v.ulid(), "01ARZ3NDEKTSV4RRFFQ69G5FAV", "01ARZ3NDEKTSV4RRFFQ69G5FAU"),
            (v.mac(), "00:1A:2b:3C:4d:5E", "00-1A-2B-3C-4D-5E"),
            (v.cidrv4(), "192.168.0.0/24", "192.168.0.1"),
            (v.cidrv4(), "10.0.0.1/8", "::1/128"),
            (v.cidrv6(), "2001:db8::/32", "10.0.0.0/8"),
            (v.e164(), "+14155552671", "14155552671"),
            (v.e164(), "+442071838750", "+0123"),
            (v.uuidv4(), "9b2c3e4f-1a2b-4c3d-8e9f-0a1b2c3d4e5f", "9b2c3e4f-1a2b-1c3d-8e9f-0a1b2c3d4e5f"),
            (v.iso.date(), "2024-02-29", "2024-13-01"),
            (v.iso.time(), "23:59:59.5", "24:00"),
            (v.iso.datetime(), "2024-01-01T10:00:00Z", "2024-01-01"),
            (v.iso.duration(), "P1DT2H", "PT"),
            (v.iso.duration(), "P3W", "1D"),
        ],
    )
    def test_formats(self, schema, good, bad):
        """Test each format accepts a valid value and rejects an invalid one."""
        assert schema.parse(good) == good
        issue = schema.safe_parse(bad).error.first_issue
        assert issue.code is ErrorKind.FORMAT_VIOLATION

    def test_format_message_names_the_format(self):
        """Test the failure message and parameters name the format."""
        issue = v.hostname().safe_parse("nope").error.first_issue
        assert issue.message == "Invalid hostname format"
        assert issue.params["format"] == "hostname"

    def test_formats_reject_non_strings(self):
        """Test formats keep the string kind check."""
        assert v.hex().safe_parse(255).error.first_issue.code is ErrorKind.INVALID_KIND

    def test_format_on_string_chain(self):
        """Test formats combine with other string checks."""
        schema = v.string().trim().format("mac").to_upper()
        assert schema.parse(" 00:1a:2b:3c:4d:5e ") == "00:1A:2B:3C:4D:5E"

    def test_unknown_format_name(self):
        """Test asking for an unknown format fails at build time."""
        with pytest.raises(SchemaDefinitionError):
            v.string().format("zipcode")

    def test_hash(self):
        """Test digests are checked by length for each algorithm."""
        md5 = "d41d8cd98f00b204e9800998ecf8427e"
        assert v.hash("md5").is_valid(md5)
        assert v.hash("md5").is_valid(md5.upper())
        assert not v.hash("sha256").is_valid(md5)
        assert v.hash().is_valid("a" * 64)
        assert v.hash("sha512").safe_parse("zz").error.first_issue.message == "Invalid sha512 hash"
        with pytest.raises(SchemaDefinitionError):
            v.hash("crc32")

    def test_string_format_with_regex(self):
        """Test a custom format defined by a regex."""
        sku = v.string_format("sku", r"^[A-Z]{3}-\d{4}$")
        assert sku.is_valid("ABC-1234")
        issue = sku.safe_parse("abc-1234").error.first_issue
        assert issue.code is ErrorKind.FORMAT_VIOLATION
        assert issue.message == "Invalid sku format"

    def test_string_format_with_predicate(self):
        """Test a custom format defined by a function."""
        palindrome = v.string_format("palindrome", lambda s: s == s[::-1], "not a palindrome")
        assert palindrome.is_valid("level")
        assert palindrome.safe_parse("levels").error.first_issue.message == "not a palindrome"


class TestStringBool:
    """Test boolean strings."""

    def test_default_tokens(self):
        """Test the default truthy and falsy tokens, ignoring case."""
        schema = v.stringbool()
        for token in ("true", "1", "YES", "On", "y", "enabled"):
            assert schema.parse(token) is True
        for token in ("false", "0", "No", "OFF", "n", "disabled"):
            assert schema.parse(token) is False

    def test_booleans_pass_through(self):
        """Test real booleans are accepted unchanged."""
        assert v.stringbool().parse(True) is True
        assert v.stringbool().parse(False) is False

    def test_unknown_token(self):
        """Test unrecognized strings fail with INVALID_VALUE."""
        issue = v.stringbool().safe_parse("maybe").error.first_issue
        assert issue.code is ErrorKind.INVALID_VALUE
        assert issue.params["received"] == "maybe"
        assert issue.message.startswith("Expected one of [true, 1, yes")

    def test_non_string(self):
        """Test values that are neither strings nor booleans fail the kind check."""
        issue = v.stringbool().safe_parse(1).error.first_issue
        assert issue.code is ErrorKind.INVALID_KIND
        assert issue.message == "Expected a boolean string"

    def test_custom_tokens(self):
        """Test custom truthy and falsy sets replace the defaults."""
        schema = v.stringbool(truthy=["si"], falsy=["no"])
        assert schema.parse("SI") is True
        assert schema.parse("no") is False
        assert not schema.is_valid("yes")

    def test_case_sensitive(self):
        """Test case-sensitive matching."""
        assert not v.stringbool(case_sensitive=True).is_valid("TRUE")
        assert v.stringbool(case_sensitive=True).parse("true") is True
        assert not v.stringbool().exact_case().is_valid("Yes")
        assert v.stringbool().exact_case().ignore_case().is_valid("Yes")


class TestTemplateLiteral:
    """Test template literal strings."""

    def test_typed_slots(self):
        """Test number and enum slots."""
        schema = v.template_literal("user-", v.number(), "-", v.enum("a", "b"))
        assert schema.parse("user-42-a") == "user-42-a"
        assert schema.is_valid("user--4.5-b")
        assert not schema.is_valid("user-x-a")
        assert not schema.is_valid("user-42-c")

    def test_string_and_literal_slots(self):
        """Test string slots match any text and literals match exactly."""
        schema = v.template_literal(v.string(), "@", v.literal("example.com"))
        assert schema.is_valid("me@example.com")
        assert not schema.is_valid("me@example.org")
        assert not schema.is_valid("@example.com")

    def test_boolean_bigint_and_null_slots(self):
        """Test boolean, bigint and null slots match their text forms."""
        assert v.template_literal("flag=", v.boolean()).is_valid("flag=true")
        assert not v.template_literal("flag=", v.boolean()).is_valid("flag=1")
        assert v.template_literal("n", v.bigint()).is_valid("n-12")
        assert not v.template_literal("n", v.bigint()).is_valid("n1.5")
        assert v.template_literal("x:", v.null()).is_valid("x:null")

    def test_fixed_text_is_escaped(self):
        """Test regex characters in fixed parts match literally."""
        schema = v.template_literal("a.b", v.bigint())
        assert schema.is_valid("a.b12")
        assert not schema.is_valid("axb12")

    def test_failures(self):
        """Test kind and pattern failures."""
        schema = v.template_literal("id-", v.number())
        assert schema.safe_parse(5).error.first_issue.code is ErrorKind.INVALID_KIND
        issue = schema.safe_parse("id-").error.first_issue
        assert issue.code is ErrorKind.FORMAT_VIOLATION
        assert "pattern" in issue.params


class TestJsonAndFunction:
    """Test JSON strings and callables."""

    def test_json_decodes_then_validates(self):
        """Test JSON text is decoded and checked against the schema."""
        schema = v.json(v.object({"a": v.number()}))
        assert schema.parse('{"a": 1}') == {"a": 1}
        assert schema.safe_parse('{"a": "x"}').issues[0].path == ("a",)

    def test_invalid_json(self):
        """Test malformed JSON fails with FORMAT_VIOLATION."""
        issue = v.json().safe_parse('{"a":').error.first_issue
        assert issue.code is ErrorKind.FORMAT_VIOLATION
        assert issue.message.startswith("Invalid JSON:")

    def test_json_without_schema(self):
        """Test any decoded value is accepted without a schema."""
        assert v.json().parse("[1, 2]") == [1, 2]
        assert v.json().parse("null") is None

    def test_decoded_values_pass_through(self):
        """Test values that are not strings are treated as already decoded."""
        assert v.json(v.number()).parse(5) == 5
        assert not v.json(v.number()).is_valid([5])

    def test_function(self):
        """Test callables are accepted and other values rejected."""
        assert v.function().parse(len) is len
        assert v.function().is_valid(lambda: None)
        assert v.function().is_valid(str)
        assert v.function().safe_parse(1).error.first_issue.message == "Expected a function"
