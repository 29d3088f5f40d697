import unittest

from gradeplanner.core.gpa import (
    Course,
    calculate_cgpa,
    calculate_sgpa,
    grade_distribution,
    performance_tier,
    project_required_gpa,
    summarize,
)


class GPATests(unittest.TestCase):
    def test_sgpa(self):
        courses = [Course("1", "A", "4", "9"), Course("2", "B", "5", "8"), Course("3", "C", "2", "10")]
        self.assertAlmostEqual(calculate_sgpa(courses), 8.73, places=2)

    def test_sgpa_without_credits(self):
        self.assertEqual(calculate_sgpa([Course("1", "A", "0", "10")]), 0)
        self.assertEqual(calculate_sgpa([]), 0)

    def test_cgpa_merges_prior_record(self):
        summary = summarize([Course("1", "Course 1", "4", "10")], "8.0", "40")
        self.assertAlmostEqual(summary.cumulative_cgpa, 8.1818, places=4)
        self.assertEqual(summary.total_credits, 44)
        self.assertEqual(summary.semester_gpa, 10)

    def test_no_prior_record_equals_sgpa(self):
        courses = [Course("1", "A", "4", "9"), Course("2", "B", "3", "7")]
        self.assertAlmostEqual(calculate_cgpa(0, 0, courses), calculate_sgpa(courses))
        summary = summarize(courses)
        self.assertAlmostEqual(summary.cumulative_cgpa, summary.semester_gpa)

    def test_form_text_is_parsed_leniently(self):
        summary = summarize([Course("1", "A", "abc", "10")], "", "", "12")
        self.assertEqual(summary.total_credits, 0)
        self.assertEqual(summary.cumulative_cgpa, 0)
        self.assertEqual(summary.total_subjects, 13)

    def test_distribution(self):
        grades = ["10", "10", "9", "8", "7", "6", "5", "0"]
        courses = [Course(str(i), f"Course {i}", "4", grade) for i, grade in enumerate(grades)]
        distribution = grade_distribution(courses)
        self.assertEqual(distribution, {"S": 2, "A": 1, "B": 1, "C": 1, "Others": 3})
        self.assertEqual(sum(distribution.values()), len(courses))

    def test_u_grade_counts_four_points(self):
        self.assertEqual(calculate_sgpa([Course("1", "A", "4", "4")]), 4)

    def test_unknown_grade(self):
        with self.assertRaises(ValueError):
            calculate_sgpa([Course("1", "A", "4", "11")])

    def test_tiers(self):
        self.assertEqual(performance_tier(9.0), "Outstanding")
        self.assertEqual(performance_tier(8.99), "Very Good")
        self.assertEqual(performance_tier(7.0), "Good")
        self.assertEqual(performance_tier(6.5), "Satisfactory")
        self.assertEqual(performance_tier(5.99), "Action Required")


class ProjectionTests(unittest.TestCase):
    def setUp(self):
        self.summary = summarize([], "8", "40")

    def test_reachable_target(self):
        projection = project_required_gpa(8.5, 20, self.summary)
        self.assertAlmostEqual(projection.required_gpa, 9.5)
        self.assertTrue(projection.possible)

    def test_unreachable_target(self):
        projection = project_required_gpa(10, 4, self.summary)
        self.assertAlmostEqual(projection.required_gpa, 30)
        self.assertFalse(projection.possible)

    def test_no_future_credits(self):
        projection = project_required_gpa(9, 0, self.summary)
        self.assertIsNone(projection.required_gpa)
        self.assertFalse(projection.possible)


if __name__ == "__main__":
    unittest.main()
