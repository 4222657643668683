import unittest
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, Numeric, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from queryfilter.services.filter_operators import (
    OPERATOR_PRECEDENCE,
    FilterOperator,
    ParsedFilter,
    coerce_filter_value,
    parse_filter_phrase,
)


class _Base(DeclarativeBase):
    pass


class _TypedModel(_Base):
    __tablename__ = "_typed_model"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    bool_col: Mapped[bool] = mapped_column(Boolean)
    float_col: Mapped[float] = mapped_column(Float)
    numeric_col: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    date_col: Mapped[date] = mapped_column(Date)
    dt_col: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    uuid_col: Mapped[uuid.UUID] = mapped_column(Uuid)
    text_col: Mapped[str] = mapped_column(String(50))


class PhraseParsingTests(unittest.TestCase):
    def test_each_operator(self):
        cases = {
            "id:5": FilterOperator.EQ,
            "id=5": FilterOperator.EQ_ALT,
            "id!=5": FilterOperator.NE,
            "id>=5": FilterOperator.GTE,
            "id<=5": FilterOperator.LTE,
            "id>5": FilterOperator.GT,
            "id<5": FilterOperator.LT,
            "id~5": FilterOperator.CONTAINS,
        }
        for phrase, operator in cases.items():
            with self.subTest(phrase=phrase):
                self.assertEqual(parse_filter_phrase(phrase, "id"), ParsedFilter("id", operator, "5"))

    def test_compound_operator_is_not_split_by_its_prefix(self):
        parsed = parse_filter_phrase("id>=5", "id")
        self.assertIs(parsed.operator, FilterOperator.GTE)
        self.assertEqual(parsed.value, "5")
        parsed = parse_filter_phrase("id<=5", "id")
        self.assertIs(parsed.operator, FilterOperator.LTE)
        self.assertEqual(parsed.value, "5")

    def test_precedence_puts_compound_operators_first(self):
        order = [op.value for op in OPERATOR_PRECEDENCE]
        for compound in ("!=", ">=", "<="):
            for single in (">", "<", ":", "="):
                if compound.startswith(single) or compound.endswith(single):
                    self.assertLess(order.index(compound), order.index(single))

    def test_phrase_for_other_param_is_not_applicable(self):
        self.assertIsNone(parse_filter_phrase("login:bob", "id"))
        self.assertIsNone(parse_filter_phrase("", "id"))
        self.assertIsNone(parse_filter_phrase("id", "id"))

    def test_param_must_match_whole_name(self):
        self.assertIsNone(parse_filter_phrase("loginx:1", "login"))
        self.assertIsNone(parse_filter_phrase("uuid:1", "id"))

    def test_value_keeps_operator_characters_after_first_match(self):
        parsed = parse_filter_phrase("email:a:b=c", "email")
        self.assertEqual(parsed.value, "a:b=c")

    def test_empty_value(self):
        self.assertEqual(parse_filter_phrase("login:", "login").value, "")

    def test_packed_conditions(self):
        phrase = "login:bob, id>=5"
        self.assertEqual(parse_filter_phrase(phrase, "login"), ParsedFilter("login", FilterOperator.EQ, "bob"))
        self.assertEqual(parse_filter_phrase(phrase, "id"), ParsedFilter("id", FilterOperator.GTE, "5"))
        self.assertIsNone(parse_filter_phrase(phrase, "email"))

    def test_earliest_condition_wins(self):
        parsed = parse_filter_phrase("id>1,id<5", "id")
        self.assertEqual(parsed, ParsedFilter("id", FilterOperator.GT, "1"))


class FilterValueCoercionTests(unittest.TestCase):
    def test_numbers(self):
        self.assertEqual(coerce_filter_value(_TypedModel.id, "42"), 42)
        self.assertAlmostEqual(coerce_filter_value(_TypedModel.float_col, "3.14"), 3.14)
        self.assertEqual(coerce_filter_value(_TypedModel.numeric_col, "99.50"), Decimal("99.50"))

    def test_boolean(self):
        self.assertIs(coerce_filter_value(_TypedModel.bool_col, "true"), True)
        self.assertIs(coerce_filter_value(_TypedModel.bool_col, "0"), False)

    def test_dates(self):
        self.assertEqual(coerce_filter_value(_TypedModel.date_col, "2026-02-26"), date(2026, 2, 26))
        value = coerce_filter_value(_TypedModel.dt_col, "2026-02-26")
        self.assertEqual(value, datetime(2026, 2, 26, tzinfo=timezone.utc))

    def test_uuid(self):
        uid = uuid.uuid4()
        self.assertEqual(coerce_filter_value(_TypedModel.uuid_col, str(uid)), uid)

    def test_unconvertible_values_pass_through(self):
        self.assertEqual(coerce_filter_value(_TypedModel.id, "=5"), "=5")
        self.assertEqual(coerce_filter_value(_TypedModel.bool_col, "maybe"), "maybe")
        self.assertEqual(coerce_filter_value(_TypedModel.uuid_col, "not-a-uuid"), "not-a-uuid")
        self.assertEqual(coerce_filter_value(_TypedModel.date_col, "yesterday"), "yesterday")

    def test_text_is_left_as_is(self):
        self.assertEqual(coerce_filter_value(_TypedModel.text_col, "abc"), "abc")


if __name__ == "__main__":
    unittest.main()
