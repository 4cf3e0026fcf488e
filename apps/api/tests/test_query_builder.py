"""Dynamic filter and update clause tests."""

from __future__ import annotations

from datetime import date
import unittest

from operalog.domain.query_builder import (
    Condition,
    Operator,
    build_filter_clause,
    build_report_filter_clause,
    build_update_clause,
)
from operalog.errors import ApiError, NoFieldsToUpdateError
from operalog.schemas.report import ReportFilters


class ReportFilterClauseTests(unittest.TestCase):
    def test_no_filters_yields_empty_predicate_and_pagination_params(self) -> None:
        clause = build_report_filter_clause(ReportFilters(), limit=10, offset=20)

        self.assertEqual(clause.text, "")
        self.assertEqual(clause.params, [10, 20])

    def test_single_filter_uses_where(self) -> None:
        clause = build_report_filter_clause(ReportFilters(ship_id=5), limit=10, offset=0)

        self.assertEqual(clause.text, "WHERE dr.ship_id = $3")
        self.assertEqual(clause.params, [10, 0, 5])

    def test_two_filters_chain_with_and_in_declared_order(self) -> None:
        clause = build_report_filter_clause(
            ReportFilters(ship_id=5, start_date=date(2024, 1, 1)),
            limit=10,
            offset=0,
        )

        self.assertEqual(clause.text, "WHERE dr.ship_id = $3 AND dr.report_date >= $4")
        self.assertEqual(clause.params, [10, 0, 5, date(2024, 1, 1)])

    def test_where_goes_to_first_present_filter_whatever_its_position(self) -> None:
        cases = [
            (ReportFilters(end_date=date(2024, 2, 1)), "WHERE dr.report_date <= $3"),
            (
                ReportFilters(start_date=date(2024, 1, 1), end_date=date(2024, 2, 1)),
                "WHERE dr.report_date >= $3 AND dr.report_date <= $4",
            ),
            (
                ReportFilters(ship_id=2, end_date=date(2024, 2, 1)),
                "WHERE dr.ship_id = $3 AND dr.report_date <= $4",
            ),
        ]
        for filters, expected in cases:
            with self.subTest(filters=filters):
                self.assertEqual(build_report_filter_clause(filters, limit=5, offset=0).text, expected)

    def test_count_variant_numbers_from_one(self) -> None:
        clause = build_report_filter_clause(ReportFilters(ship_id=3, end_date=date(2024, 3, 1)))

        self.assertEqual(clause.text, "WHERE dr.ship_id = $1 AND dr.report_date <= $2")
        self.assertEqual(clause.params, [3, date(2024, 3, 1)])

    def test_unsafe_column_identifier_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            build_filter_clause([Condition("id; DROP TABLE ships", Operator.EQ, 1)])


class UpdateClauseTests(unittest.TestCase):
    def test_present_fields_are_set_and_timestamp_touched(self) -> None:
        clause = build_update_clause({"name": "Ocean", "status": None, "crew": 12}, leading_params=[4])

        self.assertEqual(clause.text, "name = $2, crew = $3, updated_at = CURRENT_TIMESTAMP")
        self.assertEqual(clause.params, [4, "Ocean", 12])

    def test_falsy_but_present_values_are_kept(self) -> None:
        clause = build_update_clause({"crew": 0, "remarks": ""})

        self.assertEqual(clause.text, "crew = $1, remarks = $2, updated_at = CURRENT_TIMESTAMP")
        self.assertEqual(clause.params, [0, ""])

    def test_empty_update_is_rejected_by_default(self) -> None:
        with self.assertRaises(NoFieldsToUpdateError) as context:
            build_update_clause({"name": None}, leading_params=[4])

        self.assertIsInstance(context.exception, ApiError)
        self.assertEqual(context.exception.status_code, 400)
        self.assertEqual(context.exception.payload.code, "NO_FIELDS_TO_UPDATE")

    def test_empty_update_can_touch_only(self) -> None:
        clause = build_update_clause({}, leading_params=[4], allow_empty=True)

        self.assertEqual(clause.text, "updated_at = CURRENT_TIMESTAMP")
        self.assertEqual(clause.params, [4])
