from typing import Dict, Tuple

from gradeplanner.core.catalog import Subject, SubjectCatalog, SubjectField
from gradeplanner.core.formulas import Expr, best_of, capped, field, mean, worst_of

F = field("F")
GAA, GAA1, GAA2, GAA3 = field("GAA"), field("GAA1"), field("GAA2"), field("GAA3")
GA, GLA = field("GA"), field("GLA")
Qz1, Qz2, Qz3 = field("Qz1"), field("Qz2"), field("Qz3")
OPPE, OPPE1, OPPE2, OP = field("OPPE"), field("OPPE1"), field("OPPE2"), field("OP")
PE1, PE2 = field("PE1"), field("PE2")
NPPE, NPPE1, NPPE2, NPPE3 = field("NPPE"), field("NPPE1"), field("NPPE2"), field("NPPE3")
Bonus = field("Bonus")


def quiz_scheme(best_end: float, best_quiz: float, split_end: float, qz1: float, qz2: float) -> Expr:
    # Students get whichever weighting of the two quizzes scores higher.
    return best_of(
        best_end * F + best_quiz * best_of(Qz1, Qz2),
        split_end * F + qz1 * Qz1 + qz2 * Qz2,
    )


def quiz_only_scheme(best_quiz: float, qz1: float, qz2: float) -> Expr:
    return best_of(best_quiz * best_of(Qz1, Qz2), qz1 * Qz1 + qz2 * Qz2)


def attempt_split(best: float, worst: float, first: Expr, second: Expr) -> Expr:
    return best * best_of(first, second) + worst * worst_of(first, second)


ES_STANDARD_THEORY = 0.1 * GAA + quiz_scheme(0.6, 0.2, 0.4, 0.2, 0.3)
DS_FOUNDATION_STANDARD = quiz_scheme(0.6, 0.3, 0.45, 0.25, 0.3)
DS_DIPLOMA_STANDARD = 0.1 * GAA + 0.4 * F + 0.25 * Qz1 + 0.25 * Qz2
ES_STANDARD_LAB = 0.4 * field("WE") + 0.6 * field("ID")
ES_PROGRAMMING_THEORY = quiz_scheme(0.5, 0.2, 0.4, 0.2, 0.2)
PROGRAMMING_FIRST = 0.15 * Qz1 + 0.4 * F + attempt_split(0.25, 0.2, OPPE1, OPPE2)
APPDEV_SCHEME = quiz_scheme(0.6, 0.25, 0.4, 0.25, 0.3)


def _field(field_id: str, label: str, maximum: float = 100) -> SubjectField:
    return SubjectField(field_id, label, 0, maximum)


QUIZ_1 = _field("Qz1", "Quiz 1")
QUIZ_2 = _field("Qz2", "Quiz 2")
END_TERM = _field("F", "End Term Exam")
ASSIGNMENT_AVG = _field("GAA", "Assignment Avg (GAA)")
OPPE_1 = _field("OPPE1", "OPPE 1")
OPPE_2 = _field("OPPE2", "OPPE 2")
BONUS_5 = _field("Bonus", "Bonus (Max 5)", 5)

QUIZZES_AND_END = (QUIZ_1, QUIZ_2, END_TERM)
GAA_QUIZZES_AND_END = (ASSIGNMENT_AVG, QUIZ_1, QUIZ_2, END_TERM)
LAB_FIELDS = (_field("WE", "Weekly Experiments"), _field("ID", "In-person Demo"))
VIVA_LAB = (_field("Viva", "Lab Experiment & Viva"),)


def _subject(key: str, name: str, fields: Tuple[SubjectField, ...], formula: Expr) -> Subject:
    return Subject(key=key, name=name, fields=tuple(fields), formula=formula)


FOUNDATION = (
    _subject("maths1", "Mathematics 1", QUIZZES_AND_END, DS_FOUNDATION_STANDARD),
    _subject("english1", "English 1", QUIZZES_AND_END, DS_FOUNDATION_STANDARD),
    _subject("computational", "Computational Thinking", QUIZZES_AND_END, DS_FOUNDATION_STANDARD),
    _subject("statistics1", "Statistics 1", QUIZZES_AND_END + (BONUS_5,), DS_FOUNDATION_STANDARD + Bonus),
    _subject(
        "maths2",
        "Mathematics 2",
        QUIZZES_AND_END + (_field("Bonus", "Activity Bonus (Max 100)"),),
        capped(DS_FOUNDATION_STANDARD + Bonus, 100),
    ),
    _subject("english2", "English 2", QUIZZES_AND_END, DS_FOUNDATION_STANDARD),
    _subject("python", "Intro to Python Programming", (QUIZ_1, OPPE_1, OPPE_2, END_TERM), PROGRAMMING_FIRST),
    _subject("statistics2", "Statistics 2", QUIZZES_AND_END + (BONUS_5,), DS_FOUNDATION_STANDARD + Bonus),
)

DIPLOMA = (
    _subject("machinelearning", "Machine Learning Foundations", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "ml_techniques",
        "Machine Learning Techniques",
        GAA_QUIZZES_AND_END + (_field("Bonus", "Programming Bonus (Max 3)", 3),),
        0.05 * GAA + APPDEV_SCHEME + Bonus,
    ),
    _subject(
        "machinelearning_practice",
        "Machine Learning Practice",
        (ASSIGNMENT_AVG, OPPE_1, OPPE_2, _field("KA", "Kaggle Avg (KA)"), END_TERM),
        0.1 * GAA + 0.3 * F + 0.2 * OPPE1 + 0.2 * OPPE2 + 0.2 * field("KA"),
    ),
    _subject(
        "business_data_management",
        "Business Data Management",
        (
            _field("GA", "Graded Assignments (Best 3/4 of 10)", 10),
            _field("Qz2", "Quiz 2 (Max 20)", 20),
            _field("Timed", "Timed Assignment (Max 20)", 20),
            _field("F", "End Term Exam (Max 50)", 50),
        ),
        GA + Qz2 + field("Timed") + F,
    ),
    _subject(
        "business_analytics",
        "Business Analytics",
        (
            QUIZ_1,
            QUIZ_2,
            _field("A", "Assignments Sum (Best 2/3, Max 20)", 20),
            _field("F", "End Term Exam (Max 40)", 40),
            _field("Bonus", "Game Bonus (Max 5)", 5),
        ),
        # quizzes are entered out of 100 and scaled down to 20
        0.2 * attempt_split(0.7, 0.3, Qz1, Qz2) + field("A") + F + Bonus,
    ),
    _subject(
        "programming_python",
        "PDSA using Python",
        (ASSIGNMENT_AVG, QUIZ_1, QUIZ_2, _field("OP", "OPPE Score"), END_TERM),
        0.05 * GAA + 0.2 * OP + 0.45 * F + quiz_only_scheme(0.2, 0.1, 0.2),
    ),
    _subject(
        "databasems",
        "Database Management Systems",
        (
            _field("GAA2", "SQL Assignments (W2, W3)"),
            _field("GAA3", "Prog Assignment (W7)"),
            QUIZ_1,
            QUIZ_2,
            _field("OP", "OPPE Score"),
            END_TERM,
        ),
        0.03 * GAA2 + 0.02 * GAA3 + 0.2 * OP + 0.45 * F + quiz_only_scheme(0.2, 0.1, 0.2),
    ),
    _subject(
        "appdev1",
        "Application Development 1",
        (_field("GLA", "Lab Avg (Best 2/5 + W7)"), QUIZ_1, QUIZ_2, END_TERM),
        0.05 * GLA + APPDEV_SCHEME,
    ),
    _subject(
        "java_programming",
        "Java Programming",
        (ASSIGNMENT_AVG, QUIZ_1, QUIZ_2, _field("PE1", "OPPE 1"), _field("PE2", "OPPE 2"), END_TERM),
        0.05 * GAA + 0.45 * F + attempt_split(0.2, 0.1, PE1, PE2) + quiz_only_scheme(0.2, 0.1, 0.2),
    ),
    _subject(
        "systemcommands",
        "System Commands",
        (ASSIGNMENT_AVG, QUIZ_1, _field("OPPE", "OPPE Score"), _field("BPTA", "BPT Avg"), END_TERM),
        0.05 * GAA + 0.25 * Qz1 + 0.3 * OPPE + 0.3 * F + 0.1 * field("BPTA"),
    ),
    _subject(
        "appdev2",
        "Application Development 2",
        (_field("GAA", "Assignment Avg (W1, W2)"), QUIZ_1, QUIZ_2, END_TERM),
        0.05 * GAA + APPDEV_SCHEME,
    ),
    _subject("intro_dl_genai", "Intro to DL & GenAI", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "tools_data_science",
        "Tools in Data Science",
        (_field("GAA", "Graded Assign (GAA)"), END_TERM),
        0.1 * GAA + 0.9 * F,
    ),
)

DEGREE = (
    _subject(
        "software_engineering",
        "Software Engineering",
        (
            ASSIGNMENT_AVG,
            QUIZ_2,
            _field("GP1", "Group Project 1 (Milestone 1-3)"),
            _field("GP2", "Group Project 2 (Milestone 4-6)"),
            _field("PP", "Project Presentation"),
            _field("CP", "Course Participation"),
            END_TERM,
        ),
        0.05 * GAA + 0.2 * Qz2 + 0.4 * F + 0.1 * field("GP1") + 0.1 * field("GP2")
        + 0.1 * field("PP") + 0.05 * field("CP"),
    ),
    _subject("software_testing", "Software Testing", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject("deep_learning", "Deep Learning", GAA_QUIZZES_AND_END + (BONUS_5,), DS_DIPLOMA_STANDARD + Bonus),
    _subject("ai_search", "AI: Search Methods", GAA_QUIZZES_AND_END + (BONUS_5,), DS_DIPLOMA_STANDARD + Bonus),
    _subject(
        "strat_prof_growth",
        "Strategies for Prof. Growth",
        (ASSIGNMENT_AVG, _field("GP", "Group Project"), QUIZ_2, END_TERM),
        0.15 * GAA + 0.25 * field("GP") + 0.25 * Qz2 + 0.35 * F,
    ),
    _subject(
        "int_bigdata",
        "Intro to Big Data",
        (ASSIGNMENT_AVG, OPPE_1, OPPE_2, END_TERM, BONUS_5),
        0.1 * GAA + 0.3 * F + 0.2 * OPPE1 + 0.4 * OPPE2 + Bonus,
    ),
    _subject(
        "c_prog",
        "Programming in C",
        (ASSIGNMENT_AVG, QUIZ_1, OPPE_1, OPPE_2, END_TERM),
        0.1 * GAA + 0.2 * Qz1 + 0.2 * OPPE1 + 0.2 * OPPE2 + 0.3 * F,
    ),
    _subject("deep_learning_cv", "DL for Computer Vision", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "deep_learning_practice",
        "Deep Learning Practice",
        (
            _field("GA", "Assignment Avg (GA)"),
            QUIZ_1,
            QUIZ_2,
            _field("Qz3", "Quiz 3"),
            _field("NPPE1", "NPPE 1"),
            _field("NPPE2", "NPPE 2"),
            _field("NPPE3", "NPPE 3"),
            _field("Viva", "Viva Score"),
        ),
        0.05 * GA + 0.15 * Qz1 + 0.15 * Qz2 + 0.15 * Qz3 + 0.25 * mean(NPPE1, NPPE2, NPPE3)
        + 0.25 * field("Viva"),
    ),
    _subject("operating_systems", "Operating Systems", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "special_topics_ml",
        "Special Topics in ML (RL)",
        (ASSIGNMENT_AVG, _field("GPA", "Graded Prog. Assignments"), QUIZ_1, QUIZ_2, END_TERM, BONUS_5),
        0.05 * GAA + 0.25 * field("GPA") + 0.2 * Qz1 + 0.2 * Qz2 + 0.3 * F + Bonus,
    ),
    _subject("corporate_finance", "Corporate Finance", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "computer_networks",
        "Computer Networks",
        GAA_QUIZZES_AND_END + (_field("Prog", "Programming Assignment"),),
        0.1 * GAA + 0.3 * F + 0.25 * Qz1 + 0.25 * Qz2 + 0.1 * field("Prog"),
    ),
    _subject(
        "ds_ai_lab",
        "Data Science and AI Lab",
        (ASSIGNMENT_AVG, QUIZ_2, _field("P", "Project (Pres + Milestones)"), _field("V", "Viva"), BONUS_5),
        0.15 * GAA + 0.2 * Qz2 + 0.5 * field("P") + 0.15 * field("V") + Bonus,
    ),
    _subject(
        "app_dev_lab",
        "Application Development Lab",
        (QUIZ_2, _field("GA", "Weekly Assignments"), _field("V", "Project Viva")),
        0.2 * Qz2 + 0.3 * GA + 0.5 * field("V"),
    ),
    _subject(
        "algo_thinking_bio",
        "Algorithmic Thinking (Bio)",
        (ASSIGNMENT_AVG, _field("GRPa", "GRPa"), QUIZ_1, QUIZ_2, END_TERM),
        0.075 * GAA + 0.025 * field("GRPa") + 0.25 * Qz1 + 0.25 * Qz2 + 0.4 * F,
    ),
    _subject("big_data_bio", "Big Data & Bio Networks", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "market_research",
        "Market Research",
        (ASSIGNMENT_AVG, QUIZ_1, QUIZ_2, _field("P", "Project"), END_TERM),
        0.1 * GAA + 0.2 * Qz1 + 0.2 * Qz2 + 0.25 * field("P") + 0.25 * F,
    ),
    _subject("statistical_computing", "Statistical Computing", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
    _subject(
        "advanced_algorithms",
        "Advanced Algorithms",
        GAA_QUIZZES_AND_END,
        0.15 * GAA + quiz_scheme(0.5, 0.25, 0.45, 0.2, 0.2),
    ),
    _subject(
        "speech_technology",
        "Speech Technology",
        (ASSIGNMENT_AVG, _field("V", "Viva"), QUIZ_1, QUIZ_2, END_TERM),
        0.15 * GAA + 0.15 * field("V") + 0.3 * F + 0.2 * Qz1 + 0.2 * Qz2,
    ),
    _subject(
        "mlops",
        "MLOPS",
        (ASSIGNMENT_AVG, OPPE_1, OPPE_2, END_TERM, BONUS_5),
        capped(0.2 * GAA + 0.3 * F + 0.25 * OPPE1 + 0.25 * OPPE2 + Bonus, 100),
    ),
    _subject(
        "math_foundations_genai",
        "Math Foundations of GenAI",
        (ASSIGNMENT_AVG, QUIZ_1, QUIZ_2, _field("NPPE", "NPPE"), END_TERM),
        0.05 * GAA + 0.35 * F + 0.2 * Qz1 + 0.2 * Qz2 + 0.2 * NPPE,
    ),
    _subject("theory_computation", "Theory of Computation", GAA_QUIZZES_AND_END, DS_DIPLOMA_STANDARD),
)

FOUNDATION_ES = (
    _subject("es_english1", "English 1", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject("es_math1", "Math for Electronics 1", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject("es_estc", "Electronic Systems Thinking & Circuits", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject(
        "es_estc_lab",
        "ESTC Lab",
        (_field("EXP", "Experiment Score"), _field("RPT", "Report Score")),
        0.5 * field("EXP") + 0.5 * field("RPT"),
    ),
    _subject(
        "es_intro_c",
        "Intro to C Programming",
        (ASSIGNMENT_AVG, QUIZ_1, OPPE_1, OPPE_2, END_TERM),
        PROGRAMMING_FIRST,
    ),
    _subject(
        "es_intro_c_lab",
        "Intro to C Lab",
        (_field("TLA", "Timed Lab Assign. Avg"), _field("IL", "In-Campus Lab")),
        0.5 * field("TLA") + 0.5 * field("IL"),
    ),
    _subject("es_english2", "English 2", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject(
        "es_linux",
        "Intro to Linux Programming",
        (
            ASSIGNMENT_AVG,
            _field("NPPE", "NPPE Avg"),
            QUIZ_1,
            _field("OPE", "OPE Score"),
            _field("BPTA", "BPT Avg"),
            _field("VMT", "VM Tasks"),
            END_TERM,
        ),
        0.1 * GAA + 0.05 * NPPE + 0.2 * Qz1 + 0.25 * field("OPE") + 0.3 * F
        + 0.05 * field("BPTA") + 0.05 * field("VMT"),
    ),
    _subject(
        "es_linux_lab",
        "Intro to Linux Lab",
        (_field("OL", "Online Lab Avg"), _field("IL", "In-Campus Lab")),
        0.5 * field("OL") + 0.5 * field("IL"),
    ),
    _subject("es_digital", "Digital Systems", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject(
        "es_eec",
        "Electrical & Electronic Circuits",
        GAA_QUIZZES_AND_END + (_field("Bonus", "Tutorial Bonus (Max 3)", 3),),
        ES_STANDARD_THEORY + Bonus,
    ),
    _subject("es_electronics_lab", "Electronics Lab", LAB_FIELDS, ES_STANDARD_LAB),
    _subject(
        "es_embedded_c",
        "Embedded C Programming",
        (ASSIGNMENT_AVG, _field("GRPA", "GRPA Avg"), QUIZ_1, QUIZ_2, END_TERM),
        0.1 * GAA + 0.1 * field("GRPA") + ES_PROGRAMMING_THEORY,
    ),
    # attendance is assumed complete and contributes a flat 20
    _subject("es_embedded_c_lab", "Embedded C Lab", VIVA_LAB, 20 + 0.8 * field("Viva")),
)

DIPLOMA_ES = (
    _subject("es_math2", "Math for Electronics 2", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject(
        "es_signals",
        "Signals and Systems",
        (ASSIGNMENT_AVG, _field("GrPA", "Programming Avg (GrPA)"), QUIZ_1, QUIZ_2, END_TERM),
        0.1 * GAA + 0.1 * field("GrPA") + ES_PROGRAMMING_THEORY,
    ),
    _subject(
        "es_python_diploma",
        "Python Programming (Diploma)",
        (
            _field("GAA1", "Objective Avg (GAA1)"),
            _field("GAA2", "Programming Avg (GAA2)"),
            QUIZ_1,
            _field("PE1", "OPPE 1"),
            _field("PE2", "OPPE 2"),
            END_TERM,
        ),
        0.1 * GAA1 + 0.1 * GAA2 + 0.1 * Qz1 + 0.4 * F + attempt_split(0.25, 0.15, PE1, PE2),
    ),
    _subject("es_analog", "Analog Electronic Systems", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject("es_analog_lab", "Analog Electronics Lab", LAB_FIELDS, ES_STANDARD_LAB),
    _subject(
        "es_dsp",
        "Digital Signal Processing",
        (ASSIGNMENT_AVG, _field("LE", "Lab Avg (LE)"), _field("LV", "Lab Viva (LV)"), QUIZ_1, QUIZ_2, END_TERM),
        0.1 * GAA + 0.1 * field("LE") + 0.05 * field("LV") + quiz_scheme(0.55, 0.1, 0.45, 0.15, 0.15),
    ),
    _subject("es_sensors", "Sensors and Application", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject("es_sensors_lab", "Sensors Lab", LAB_FIELDS, ES_STANDARD_LAB),
    _subject(
        "es_dsd",
        "Digital System Design",
        (ASSIGNMENT_AVG, _field("GrPA", "Programming Avg"), QUIZ_1, QUIZ_2, END_TERM),
        0.1 * GAA + 0.1 * field("GrPA") + ES_PROGRAMMING_THEORY,
    ),
    _subject("es_dsd_lab", "DSD Lab", LAB_FIELDS, ES_STANDARD_LAB),
    _subject("es_control", "Control Engineering", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
)

DEGREE_ES = (
    _subject("es_comp_org", "Computer Organization", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject("es_em_fields", "EM Fields & Transmission Lines", GAA_QUIZZES_AND_END, ES_STANDARD_THEORY),
    _subject(
        "es_epd",
        "Electronic Product Design",
        (
            _field("GAA", "Assignments (Max 10)", 10),
            _field("Qz1", "Quiz 1 (Max 40)", 40),
            _field("Qz2", "Quiz 2 (Max 40)", 40),
            _field("F", "End Term Exam (Max 100)"),
        ),
        3 * GAA + 0.5 * (Qz1 + Qz2) + 0.3 * F,
    ),
    _subject(
        "es_strategies",
        "Strategies for Professional Growth",
        (ASSIGNMENT_AVG, _field("GP", "Group Project"), QUIZ_2, END_TERM),
        0.15 * GAA + 0.25 * field("GP") + 0.25 * Qz2 + 0.35 * F,
    ),
    _subject(
        "es_embedded_linux",
        "Embedded Linux and FPGAs",
        GAA_QUIZZES_AND_END,
        0.2 * GAA + ES_PROGRAMMING_THEORY,
    ),
    _subject("es_embedded_linux_lab", "Embedded Linux Lab", VIVA_LAB, 20 + 0.8 * field("Viva")),
    _subject(
        "es_testing",
        "Electronic Testing & Measurement",
        GAA_QUIZZES_AND_END,
        0.2 * GAA + ES_PROGRAMMING_THEORY,
    ),
)

SUBJECTS_BY_CATALOG_KEY: Dict[str, Tuple[Subject, ...]] = {
    "foundation": FOUNDATION,
    "diploma": DIPLOMA,
    "degree": DEGREE,
    "foundation-electronic-systems": FOUNDATION_ES,
    "diploma-electronic-systems": DIPLOMA_ES,
    "degree-electronic-systems": DEGREE_ES,
}


def default_catalog() -> SubjectCatalog:
    return SubjectCatalog(SUBJECTS_BY_CATALOG_KEY)
