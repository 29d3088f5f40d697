import unittest

from gradeplanner.core.gpa import Course, Projection, summarize
from gradeplanner.core.grades import grade_result
from gradeplanner.core.predictor import PredictionResult
from gradeplanner.core.report import (
    cgpa_report,
    grade_share_text,
    prediction_share_text,
    prediction_summary,
    prediction_table,
)


class ReportTests(unittest.TestCase):
    def test_grade_share_text(self):
        self.assertEqual(
            grade_share_text(grade_result(95)),
            "My projected grade is S (95%)! Checked with UI Grade Planner.",
        )

    def test_prediction_sentences(self):
        needed = PredictionResult(required=86.67, possible=True, final_grade=80.0)
        self.assertIn("at least 86.67 marks", prediction_summary("A", needed))
        secured = PredictionResult(required=0, possible=True, final_grade=55.0, guaranteed=True)
        self.assertIn("already secured", prediction_summary("E", secured))
        missed = PredictionResult(required=None, possible=False, final_grade=78.0)
        self.assertIn("mathematically impossible", prediction_summary("S", missed))
        self.assertEqual(prediction_share_text("A", needed), "I need 86.67 marks to get Grade A!")

    def test_prediction_table(self):
        table = prediction_table(
            {
                "S": PredictionResult(required=None, possible=False, final_grade=78.0),
                "A": PredictionResult(required=86.67, possible=True, final_grade=80.0),
                "E": PredictionResult(required=0, possible=True, final_grade=55.0, guaranteed=True),
            }
        )
        lines = table.splitlines()
        self.assertEqual(lines[1], "S      Not Possible")
        self.assertEqual(lines[2], "A      86.67")
        self.assertEqual(lines[3], "E      Secured")

    def test_cgpa_report(self):
        courses = [Course("1", "Course 1", "4", "10")]
        summary = summarize(courses, "8.0", "40")
        report = cgpa_report(summary, courses, Projection(required_gpa=None, possible=False))
        self.assertIn("Cumulative CGPA: 8.18 (Very Good)", report)
        self.assertIn("- Course 1: 4 credits, grade S (10)", report)
        self.assertIn("Distribution: S 1, A 0, B 0, C 0, Others 0", report)
        self.assertIn("add future credits", report)


if __name__ == "__main__":
    unittest.main()
