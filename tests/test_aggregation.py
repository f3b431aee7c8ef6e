import unittest

from gpatracker.core.aggregation import aggregate_standing, owns_record, record_counts, select_records
from gpatracker.core.models import StoredRow

BATCH = "2023-2027"


def _row(key, **data):
    data.setdefault("batch", BATCH)
    return StoredRow(key=key, data=data)


class AggregationTests(unittest.TestCase):
    def test_cgpa_is_mean_of_semesters(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa="8.00"),
            _row("u1_2023-2027_2", studentId="u1", semester=2, sgpa="9.00"),
        ]
        standing = aggregate_standing(rows, "u1", BATCH)

        self.assertEqual(standing.cgpa, 8.5)
        self.assertEqual(standing.based_on_count, 2)
        self.assertEqual(len(standing.semester_series), 8)
        self.assertEqual([p.semester for p in standing.semester_series], list(range(1, 9)))
        self.assertEqual(standing.semester_series[0].sgpa, 8.0)
        self.assertEqual(standing.semester_series[1].sgpa, 9.0)
        self.assertTrue(all(p.sgpa is None for p in standing.semester_series[2:]))

    def test_cgpa_ignores_credit_totals(self):
        rows = [
            _row("a", studentId="u1", semester=1, sgpa=6.0, credits=30),
            _row("b", studentId="u1", semester=2, sgpa=9.0, credits=10),
        ]
        self.assertEqual(aggregate_standing(rows, "u1", BATCH).cgpa, 7.5)

    def test_sparse_history_keeps_eight_slots(self):
        rows = [_row("u1_2023-2027_5", studentId="u1", semester=5, sgpa=7.4)]
        standing = aggregate_standing(rows, "u1", BATCH)
        self.assertEqual([p.sgpa for p in standing.semester_series], [None] * 4 + [7.4] + [None] * 3)

    def test_excludes_missing_and_zero_sgpa(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa="8.00"),
            _row("u1_2023-2027_2", studentId="u1", semester=2, sgpa=0),
            _row("u1_2023-2027_3", studentId="u1", semester=3),
            _row("u1_2023-2027_4", studentId="u1", semester=4, sgpa="not a number"),
            _row("u1_2023-2027_6", studentId="u1", semester=6, sgpa=-1),
        ]
        standing = aggregate_standing(rows, "u1", BATCH)
        self.assertEqual(standing.cgpa, 8.0)
        self.assertEqual(standing.based_on_count, 1)

    def test_excludes_other_batches_for_same_student(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa=8.0),
            _row("u1_2021-2025_1", studentId="u1", semester=1, sgpa=6.0, batch="2021-2025"),
        ]
        standing = aggregate_standing(rows, "u1", BATCH)
        self.assertEqual(standing.cgpa, 8.0)
        self.assertEqual(standing.based_on_count, 1)

    def test_excludes_other_students(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa=8.0),
            _row("u2_2023-2027_1", studentId="u2", semester=1, sgpa=6.0),
        ]
        self.assertEqual(aggregate_standing(rows, "u1", BATCH).cgpa, 8.0)

    def test_empty_selection(self):
        standing = aggregate_standing([], "u1", BATCH)
        self.assertIsNone(standing.cgpa)
        self.assertEqual(standing.based_on_count, 0)
        self.assertEqual(len(standing.semester_series), 8)

    def test_sorted_by_semester(self):
        rows = [
            _row("c", studentId="u1", semester="3", sgpa=7.0),
            _row("a", studentId="u1", semester=1, sgpa=9.0),
            _row("b", studentId="u1", semester=2, sgpa=8.0),
        ]
        self.assertEqual([r.semester for r in select_records(rows, "u1", BATCH)], [1, 2, 3])


class DualOwnershipTests(unittest.TestCase):
    def test_matches_explicit_owner_field(self):
        row = _row("legacy-key", studentId="u1", semester=1, sgpa=8.0)
        self.assertTrue(owns_record(row, "u1"))

    def test_matches_key_prefix_without_owner_field(self):
        row = _row("u1_2023-2027_1", semester=1, sgpa=8.0)
        self.assertTrue(owns_record(row, "u1"))
        standing = aggregate_standing([row], "u1", BATCH)
        self.assertEqual(standing.cgpa, 8.0)

    def test_no_match(self):
        row = _row("u2_2023-2027_1", studentId="u2", semester=1, sgpa=8.0)
        self.assertFalse(owns_record(row, "u1"))

    def test_empty_student_id_never_matches(self):
        row = _row("u1_2023-2027_1", semester=1, sgpa=8.0)
        self.assertFalse(owns_record(row, ""))


class KeyPrefixBoundaryTests(unittest.TestCase):
    def test_prefix_needs_separator(self):
        row = _row("u10_2023-2027_1", semester=1, sgpa=6.0)
        self.assertFalse(owns_record(row, "u1"))
        self.assertTrue(owns_record(row, "u10"))

    def test_explicit_owner_beats_key(self):
        row = _row("u1_2023-2027_1", studentId="u10", semester=1, sgpa=6.0)
        self.assertFalse(owns_record(row, "u1"))
        self.assertTrue(owns_record(row, "u10"))

    def test_longer_id_does_not_leak_into_standing(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa=9.0),
            _row("u10_2023-2027_1", studentId="u10", semester=1, sgpa=5.0),
            _row("u10_2023-2027_2", semester=2, sgpa=5.0),
        ]
        standing = aggregate_standing(rows, "u1", BATCH)
        self.assertEqual(standing.cgpa, 9.0)
        self.assertEqual(standing.based_on_count, 1)


class MalformedRowTests(unittest.TestCase):
    def test_non_finite_sgpa_is_skipped(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa="8.00"),
            _row("u1_2023-2027_2", studentId="u1", semester=2, sgpa="nan"),
            _row("u1_2023-2027_3", studentId="u1", semester=3, sgpa="inf"),
        ]
        standing = aggregate_standing(rows, "u1", BATCH)
        self.assertEqual(standing.cgpa, 8.0)
        self.assertEqual(standing.based_on_count, 1)

    def test_cgpa_tie_rounds_up(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa="8.25"),
            _row("u1_2023-2027_2", studentId="u1", semester=2, sgpa="8.00"),
        ]
        self.assertEqual(aggregate_standing(rows, "u1", BATCH).cgpa, 8.13)


class RecordCountTests(unittest.TestCase):
    def test_counts_total_and_per_batch(self):
        rows = [
            _row("u1_2023-2027_1", studentId="u1", semester=1, sgpa=8.0),
            _row("u2_2023-2027_1", studentId="u2", semester=1, sgpa=7.0),
            _row("u3_2021-2025_4", studentId="u3", semester=4, sgpa=0, batch="2021-2025"),
            StoredRow(key="orphan", data={"semester": 1}),
        ]
        stats = record_counts(rows)
        self.assertEqual(stats.total, 4)
        self.assertEqual(stats.by_batch, {"2023-2027": 2, "2021-2025": 1})

    def test_empty_store(self):
        self.assertEqual(record_counts([]).to_dict(), {"total": 0, "by_batch": {}})


if __name__ == "__main__":
    unittest.main()
