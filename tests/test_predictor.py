import math
import unittest

from gradeplanner.core.evaluator import SubjectNotFound
from gradeplanner.core.formulas import field, worst_of
from gradeplanner.core.grades import GRADE_THRESHOLDS, TARGET_GRADES, grade_result
from gradeplanner.core.predictor import Predictor, invert, solve_required
from gradeplanner.core.subjects_data import DS_FOUNDATION_STANDARD, default_catalog


class InversionTests(unittest.TestCase):
    def test_binding_arm_is_the_cheapest_one(self):
        inversion = invert(DS_FOUNDATION_STANDARD, {"Qz1": 60, "Qz2": 60}, "F", 90)
        # 0.6F + 18 reaches 90 before 0.45F + 33 does
        self.assertAlmostEqual(inversion.value, 120)
        self.assertAlmostEqual(inversion.arm.slope, 0.6)
        self.assertAlmostEqual(inversion.arm.intercept, 18)

    def test_constant_formula(self):
        self.assertEqual(invert(field("A") + 0, {"A": 50}, "F", 40).value, -math.inf)
        self.assertEqual(invert(field("A") + 0, {"A": 30}, "F", 40).value, math.inf)

    def test_min_over_free_field_has_no_arms(self):
        self.assertIsNone(invert(worst_of(field("F"), 80), {}, "F", 60))


class SolveRequiredTests(unittest.TestCase):
    def test_bisection_fallback(self):
        result = solve_required(worst_of(field("F"), 80), {}, 60)
        self.assertTrue(result.possible)
        self.assertAlmostEqual(result.required, 60.0)

    def test_bisection_fallback_impossible(self):
        result = solve_required(worst_of(field("F"), 80), {}, 90)
        self.assertFalse(result.possible)
        self.assertIsNone(result.required)
        self.assertEqual(result.final_grade, 80)


class PredictorTests(unittest.TestCase):
    def setUp(self):
        self.catalog = default_catalog()
        self.predictor = Predictor(self.catalog)

    def test_maths1_s_out_of_reach(self):
        result = self.predictor.predict_required_score("foundation", "maths1", {"Qz1": 60, "Qz2": 60}, "S")
        self.assertFalse(result.possible)
        self.assertIsNone(result.required)
        self.assertEqual(result.final_grade, 78)

    def test_required_score_is_minimal(self):
        values = {"Qz1": 80, "Qz2": 70}
        result = self.predictor.predict_required_score("foundation", "maths1", values, "A")
        self.assertTrue(result.possible)
        self.assertAlmostEqual(result.required, 86.67)
        formula = self.catalog.find("foundation", "maths1").formula
        self.assertGreaterEqual(formula.evaluate({**values, "F": result.required}), 80)
        self.assertLess(formula.evaluate({**values, "F": result.required - 0.01}), 80)
        self.assertGreaterEqual(result.final_grade, 80)

    def test_required_score_lands_in_target_band_for_every_subject(self):
        for bucket, subject in self.catalog:
            values = {
                item.id: item.min + 0.6 * (item.max - item.min) for item in subject.fields if item.id != "F"
            }
            free = subject.free_field
            low, high = (free.min, free.max) if free is not None else (0.0, 100.0)
            for grade in TARGET_GRADES:
                result = solve_required(subject.formula, values, GRADE_THRESHOLDS[grade], low=low, high=high)
                if not result.possible or result.guaranteed:
                    continue
                with self.subTest(bucket=bucket, subject=subject.key, grade=grade):
                    score = subject.formula.evaluate({**values, "F": result.required})
                    self.assertEqual(grade_result(score).letter, grade)

    def test_already_secured(self):
        result = self.predictor.predict_required_score("foundation", "maths1", {"Qz1": 100, "Qz2": 100}, "E")
        self.assertTrue(result.possible)
        self.assertTrue(result.guaranteed)
        self.assertEqual(result.required, 0)
        self.assertEqual(result.final_grade, 55)

    def test_capped_formula_unwraps_cap(self):
        result = self.predictor.predict_required_score("foundation", "maths2", {"Qz1": 100, "Qz2": 100}, "S")
        self.assertTrue(result.possible)
        self.assertAlmostEqual(result.required, 77.78)

    def test_short_end_term_uses_its_own_maximum(self):
        values = {"Qz1": 100, "Qz2": 100, "A": 20}
        a_grade = self.predictor.predict_required_score("diploma", "business_analytics", values, "A")
        self.assertTrue(a_grade.possible)
        self.assertAlmostEqual(a_grade.required, 40)
        s_grade = self.predictor.predict_required_score("diploma", "business_analytics", values, "S")
        self.assertFalse(s_grade.possible)
        self.assertEqual(s_grade.final_grade, 80)

    def test_subject_without_end_term(self):
        secured = self.predictor.predict_required_score("foundation", "es_electronics_lab", {"WE": 100, "ID": 100}, "S")
        self.assertTrue(secured.guaranteed)
        missed = self.predictor.predict_required_score("foundation", "es_electronics_lab", {"WE": 0, "ID": 0}, "E")
        self.assertFalse(missed.possible)
        self.assertEqual(missed.final_grade, 0)

    def test_unknown_target_grade(self):
        result = self.predictor.predict_required_score("foundation", "maths1", {}, "U")
        self.assertIsNone(result.required)
        self.assertFalse(result.possible)
        self.assertEqual(result.final_grade, 0)

    def test_unknown_subject(self):
        result = self.predictor.predict_required_score("foundation", "alchemy", {}, "S")
        self.assertIsInstance(result, SubjectNotFound)
        self.assertIsInstance(self.predictor.predict_all("foundation", "alchemy", {}), SubjectNotFound)

    def test_predict_all_covers_every_target(self):
        results = self.predictor.predict_all("foundation", "python", {"Qz1": 80, "OPPE1": 90, "OPPE2": 70})
        self.assertEqual(tuple(results), TARGET_GRADES)
        required = [result.required for result in results.values() if result.required is not None]
        self.assertEqual(required, sorted(required, reverse=True))

    def test_end_term_value_in_inputs_is_ignored(self):
        with_f = self.predictor.predict_required_score("foundation", "maths1", {"Qz1": 80, "Qz2": 70, "F": 100}, "A")
        without_f = self.predictor.predict_required_score("foundation", "maths1", {"Qz1": 80, "Qz2": 70}, "A")
        self.assertEqual(with_f, without_f)


if __name__ == "__main__":
    unittest.main()
