"""Static subject catalog, used when the live catalog cannot be read."""
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from gpatracker.core.models import Subject
from gpatracker.data.regulations import batches_for_regulation


def _semester(*rows: Tuple[str, str, float]) -> Tuple[Subject, ...]:
    return tuple(Subject(code, name, credits) for code, name, credits in rows)


REG_2021_SUBJECTS: Mapping[int, Tuple[Subject, ...]] = MappingProxyType(
    {
        1: _semester(
            ("BS3171", "Physics and Chemistry Laboratory", 2),
            ("CY3151", "Engineering Chemistry", 3),
            ("GE3151", "Problem Solving and Python Programming", 3),
            ("GE3152", "Heritage of Tamils", 1),
            ("GE3171", "Problem Solving and Python Programming Laboratory", 2),
            ("GE3172", "English Laboratory", 1),
            ("HS3152", "Professional English - I", 3),
            ("MA3151", "Matrices and Calculus", 4),
            ("PH3151", "Engineering Physics", 3),
        ),
        2: _semester(
            ("AD3251", "Data Structures Design", 3),
            ("AD3271", "Data Structures Design Laboratory", 2),
            ("BE3251", "Basic Electrical and Electronics Engineering", 3),
            ("GE3251", "Engineering Graphics", 4),
            ("GE3252", "Tamils and Technology", 1),
            ("GE3271", "Engineering Practices Laboratory", 2),
            ("GE3272", "Communication Lab", 2),
            ("HS3252", "Professional English - II", 2),
            ("MA3251", "Statistics and Numerical Methods", 4),
            ("PH3256", "Physics for Information Science", 3),
        ),
        3: _semester(
            ("AD3351", "Design and Analysis of Algorithms", 4),
            ("AD3491", "Fundamentals of Data Science and Analytics", 3),
            ("CS3351", "Digital Principles and Computer Organization", 4),
            ("CS3381", "Object-Oriented Programming Laboratory", 1.5),
            ("CS3391", "Object-Oriented Programming", 3),
            ("CW3301", "Fundamentals of Economics", 3),
            ("CW3311", "Business Communication Laboratory I", 1.5),
            ("GE3361", "Professional Development", 1),
            ("MA3354", "Discrete Mathematics", 4),
        ),
        4: _semester(
            ("AD3461", "Machine Learning Laboratory", 2),
            ("AL3451", "Machine Learning", 3),
            ("AL3452", "Operating Systems", 4),
            ("CS3481", "Database Management Systems Laboratory", 1.5),
            ("CS3492", "Database Management Systems", 3),
            ("CW3401", "Introduction to Business Systems", 3),
            ("CW3411", "Business Communication Laboratory II", 1.5),
            ("GE3451", "Environmental Sciences and Sustainability", 2),
            ("MA3391", "Probability and Statistics", 4),
        ),
        5: _semester(
            ("CCS336", "Cloud Service Management", 3),
            ("CCS346", "Exploratory Data Analysis", 3),
            ("CS3691", "Embedded Systems and IoT", 4),
            ("CW3501", "Fundamentals of Management", 3),
            ("CW3511", "Summer Internship", 2),
            ("CW3551", "Data and Information Security", 3),
            ("MX3084", "Disaster Risk Reduction and Management (Non-credit)", 0),
        ),
        6: _semester(
            ("CW3601", "Business Analytics", 3),
            ("CCB331", "Marketing Research and Marketing Management", 3),
            ("CW3007", "IT Project Management", 3),
            ("CCS356", "Object Oriented Software Engineering", 3),
            ("CCS337", "Cognitive Science", 3),
            ("OIE351", "Introduction to Industrial Engineering", 3),
            ("MX3086", "History of Science and Technology in India (Non-credit)", 0),
            ("CW3611", "Business Analytics Laboratory", 2),
        ),
    }
)

REG_2023_SUBJECTS: Mapping[int, Tuple[Subject, ...]] = MappingProxyType(
    {
        1: _semester(
            ("PUCC1HM01", "Professional English - I", 2),
            ("PUCC1BS01", "Matrices and Calculus", 4),
            ("PUCC1BS02", "Engineering Physics", 3),
            ("PUCC1BS03", "Engineering Chemistry", 3),
            ("PUCC1BE01", "Engineering Graphics", 4),
            ("PUCC1HM02", "Heritage of Tamil", 1),
            ("PUCC1PL01", "Professional English - I(Lab)", 2),
            ("PUCC1PL02", "Physics and Chemistry Laboratory", 2),
        ),
        2: _semester(
            ("PUCC2HMO4", "Professional English - II", 2),
            ("PUCC2BS04", "Statistics and Numerical Methods", 4),
            ("PUCS2BS05", "Physics for Information Sciences", 3),
            ("PUCC2BE02", "Basic Electrical and Electronics Engineering", 3),
            ("PUCC2BE03", "Introduction to Computer Science & Business Systems", 3),
            ("PUCC2BE04", "Problem Solving using Python Programming", 2),
            ("PUCC2HM05", "Tamils and Technology", 1),
            ("PUCC2PL03", "Professional English - II(Lab)", 2),
            ("PUCC2PL04", "Problem Solving using Python Programming Laboratory", 2),
            ("PUCC2PL05", "Civil and Mechanical Engineering Practices", 1),
            ("PUCC2PL06", "Electrical and Electronics Engineering Practices", 1),
        ),
        3: _semester(
            ("PUAD2BE03", "Fundamentals of Data Science and Analytics", 3),
            ("PUAD3PL02", "Fundamentals of Data Science and Analytics Laboratory", 2),
            ("PUCB3BS09", "Discrete Mathematics", 4),
            ("PUCB3PL01", "Business Communication Laboratory", 1),
            ("PUCC3HM07", "Extension Activities", 0),
            ("PUCC3MC04", "Mandatory(Non-credit)", 0),
            ("PUCS3PC01", "Computer Organization & Architecture", 4),
            ("PUCS3PC03", "Data Structures and Algorithms", 4),
            ("PUCS3PC04", "Object-Oriented Programming", 3),
            ("PUCS3PL02", "Object-Oriented Programming Laboratory", 2),
        ),
        4: _semester(
            ("PUCC4BS06", "Environmental Sciences & Sustainability", 3),
            ("PUCB4PC01", "Introduction to Innovation, IPR and Product Development", 3),
            ("PUCB4PC02", "Embedded Systems and IOT", 4),
            ("PUIT4PC03", "Database Management Systems", 4),
            ("PUIT4PC04", "Operating Systems", 4),
            ("PUCC4MCXX", "Mandatory Course-II(Non-credit)", 0),
            ("PUIT4PL01", "Operating Systems Laboratory", 2),
            ("PUIT4PL02", "Database Management Systems Laboratory", 2),
            ("PUCC4HM08", "Extension Activities", 0),
            ("PUCB4IP01", "In-Plant Training/Internship", 0),
        ),
    }
)

# Batches under regulations 2017 and 2021 share the 2021 syllabus; 2023 and
# 2026 share the 2023 one.
_SUBJECTS_BY_REGULATION: Mapping[str, Mapping[int, Tuple[Subject, ...]]] = MappingProxyType(
    {
        "2017": REG_2021_SUBJECTS,
        "2021": REG_2021_SUBJECTS,
        "2023": REG_2023_SUBJECTS,
        "2026": REG_2023_SUBJECTS,
    }
)

SUBJECTS_BY_BATCH: Mapping[str, Mapping[int, Tuple[Subject, ...]]] = MappingProxyType(
    {
        batch: subjects
        for regulation, subjects in _SUBJECTS_BY_REGULATION.items()
        for batch in batches_for_regulation(regulation)
    }
)


def static_subjects(batch: str, semester: int) -> Tuple[Subject, ...]:
    return SUBJECTS_BY_BATCH.get(batch, {}).get(semester, ())


def available_batches(regulation: Optional[str] = None) -> Tuple[str, ...]:
    if regulation:
        return tuple(b for b in batches_for_regulation(regulation) if b in SUBJECTS_BY_BATCH)
    return tuple(SUBJECTS_BY_BATCH)


def available_semesters(batch: str) -> Tuple[int, ...]:
    return tuple(sorted(SUBJECTS_BY_BATCH.get(batch, {})))
