import unittest

from gradeplanner.core.formulas import (
    BestOf,
    Const,
    Field,
    FormulaError,
    Linear,
    best_of,
    capped,
    field,
    formula_from_dict,
    mean,
    worst_of,
)
from gradeplanner.core.subjects_data import DS_FOUNDATION_STANDARD, attempt_split, quiz_scheme


class FormulaEvaluationTests(unittest.TestCase):
    def test_operators_build_weighted_sums(self):
        expr = 0.5 * field("a") + 10
        self.assertIsInstance(expr, Linear)
        self.assertEqual(expr.evaluate({"a": 20}), 20)

    def test_missing_fields_count_as_zero(self):
        expr = field("a") + field("b")
        self.assertEqual(expr.evaluate({"a": 7}), 7)

    def test_best_worst_mean_and_cap(self):
        values = {"a": 30, "b": 60, "c": 90}
        self.assertEqual(best_of(field("a"), field("b")).evaluate(values), 60)
        self.assertEqual(worst_of(field("a"), field("b")).evaluate(values), 30)
        self.assertEqual(mean(field("a"), field("b"), field("c")).evaluate(values), 60)
        self.assertEqual(capped(field("b") + field("c"), 100).evaluate(values), 100)

    def test_attempt_split_is_order_independent(self):
        expr = attempt_split(0.25, 0.2, field("OPPE1"), field("OPPE2"))
        self.assertAlmostEqual(expr.evaluate({"OPPE1": 90, "OPPE2": 70}), 36.5)
        self.assertAlmostEqual(expr.evaluate({"OPPE1": 70, "OPPE2": 90}), 36.5)

    def test_quiz_scheme_takes_better_weighting(self):
        expr = quiz_scheme(0.6, 0.3, 0.45, 0.25, 0.3)
        # 0.6*50 + 0.3*100 = 60 beats 0.45*50 + 0.25*0 + 0.3*100 = 52.5
        self.assertAlmostEqual(expr.evaluate({"F": 50, "Qz1": 0, "Qz2": 100}), 60)

    def test_field_ids(self):
        self.assertEqual(DS_FOUNDATION_STANDARD.field_ids(), frozenset({"F", "Qz1", "Qz2"}))

    def test_str_is_readable(self):
        self.assertEqual(str(best_of(field("a"), 0.5 * field("b"))), "max(a, 0.5b)")
        self.assertEqual(str(capped(field("a"), 100)), "min(100, a)")


class FormulaValidationTests(unittest.TestCase):
    def test_negative_weight_rejected(self):
        with self.assertRaises(FormulaError):
            field("a") * -1

    def test_empty_options_rejected(self):
        with self.assertRaises(FormulaError):
            best_of()
        with self.assertRaises(FormulaError):
            mean()

    def test_non_numeric_operand_rejected(self):
        with self.assertRaises(TypeError):
            field("a") + "b"


class FormulaSerialisationTests(unittest.TestCase):
    def test_subject_formula_survives_dict_form(self):
        rebuilt = formula_from_dict(DS_FOUNDATION_STANDARD.to_dict())
        self.assertEqual(rebuilt, DS_FOUNDATION_STANDARD)

    def test_capped_and_const_nodes(self):
        expr = capped(20 + 0.8 * field("Viva"), 100)
        data = expr.to_dict()
        self.assertEqual(data["cap"], 100.0)
        self.assertEqual(formula_from_dict(data), expr)

    def test_reads_hand_written_records(self):
        expr = formula_from_dict(
            {"sum": [[0.4, {"field": "F"}], [0.6, {"best_of": [{"field": "Qz1"}, {"const": 50}]}]]}
        )
        self.assertEqual(expr, Linear(((0.4, Field("F")), (0.6, BestOf((Field("Qz1"), Const(50.0)))))))
        self.assertAlmostEqual(expr.evaluate({"F": 100, "Qz1": 20}), 70)

    def test_unknown_node(self):
        with self.assertRaises(FormulaError):
            formula_from_dict({"median": []})

    def test_malformed_nodes(self):
        for data in ({"capped": {"field": "F"}}, {"sum": [[-1, {"field": "F"}]]}, {"const": "x"}, ["F"]):
            with self.subTest(data=data):
                with self.assertRaises(FormulaError):
                    formula_from_dict(data)


if __name__ == "__main__":
    unittest.main()
