"""
Value model tests: construction limits, classification, parsing.
"""

import pytest

from hrm_vm.cpu.values import EMPTY, NUM_MAX, NUM_MIN, Value, ValueKind, parse_value


class TestNumbers:
    @pytest.mark.parametrize("n", [NUM_MIN, -1, 0, 1, NUM_MAX])
    def test_valid_number_reads_back(self, n):
        v = Value.number(n)
        assert v.kind is ValueKind.NUMBER
        assert v.payload == n

    @pytest.mark.parametrize("n", [NUM_MIN - 1, NUM_MAX + 1, 5000])
    def test_out_of_range_number_is_refused(self, n):
        with pytest.raises(ValueError):
            Value.number(n)

    def test_bool_is_not_a_number(self):
        with pytest.raises(ValueError):
            Value.number(True)

    def test_numbers_compare_by_value(self):
        assert Value.number(42) == Value.number(42)
        assert Value.number(42) != Value.number(-42)

    @pytest.mark.parametrize("payload", [5000, -1000, True, "7", None])
    def test_direct_construction_is_checked(self, payload):
        with pytest.raises(ValueError):
            Value(ValueKind.NUMBER, payload)


class TestCharacters:
    def test_uppercase_letter(self):
        v = Value.char("Q")
        assert v.is_char
        assert v.payload == "Q"

    @pytest.mark.parametrize("c", ["a", "AB", "", "1", "@"])
    def test_non_letters_are_refused(self, c):
        with pytest.raises(ValueError):
            Value.char(c)

    @pytest.mark.parametrize("payload", ["a", "AB", 1, None])
    def test_direct_construction_is_checked(self, payload):
        with pytest.raises(ValueError):
            Value(ValueKind.CHAR, payload)

    def test_letter_index(self):
        assert Value.char("A").letter_index == 1
        assert Value.char("Z").letter_index == 26

    def test_letter_index_of_number_raises(self):
        with pytest.raises(ValueError):
            Value.number(3).letter_index


class TestClassification:
    def test_empty(self):
        assert EMPTY.is_empty
        assert Value.empty() is EMPTY
        assert not EMPTY.is_number

    def test_addresses(self):
        assert Value.number(3).is_address
        assert Value.mem_addr(3).is_address
        assert not Value.char("C").is_address
        assert not Value.prog_addr(3).is_address

    def test_prog_addr_is_one_based(self):
        with pytest.raises(ValueError):
            Value.prog_addr(0)

    def test_same_kind(self):
        assert Value.number(1).same_kind(Value.number(2))
        assert not Value.number(1).same_kind(Value.char("A"))

    def test_str(self):
        assert str(EMPTY) == "_"
        assert str(Value.number(-7)) == "-7"
        assert str(Value.char("K")) == "K"
        assert str(Value.mem_addr(2)) == "[2]"
        assert str(Value.prog_addr(4)) == "@4"


class TestTagPayloadAgreement:
    def test_empty_carries_no_payload(self):
        with pytest.raises(ValueError):
            Value(ValueKind.EMPTY, 0)
        assert Value(ValueKind.EMPTY) == EMPTY

    def test_program_address_is_positive(self):
        with pytest.raises(ValueError):
            Value(ValueKind.PROG_ADDR, 0)

    def test_memory_address_is_int(self):
        with pytest.raises(ValueError):
            Value(ValueKind.MEM_ADDR, "3")
        assert Value(ValueKind.MEM_ADDR, -1).payload == -1

    def test_kind_must_be_value_kind(self):
        with pytest.raises(ValueError):
            Value("NUMBER", 1)


class TestParseValue:
    def test_integer(self):
        assert parse_value(" -12 ") == Value.number(-12)

    def test_lowercase_letter_is_folded(self):
        assert parse_value("d") == Value.char("D")

    @pytest.mark.parametrize("text", ["1000", "-1000", "AB", "", "1.5"])
    def test_bad_tokens(self, text):
        with pytest.raises(ValueError):
            parse_value(text)
