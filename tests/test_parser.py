"""
Unit tests for the heuristic resume field extractor.
"""
import pytest

from jobmatch.models import ParsedResume
from jobmatch.parser import (
    EDUCATION,
    EXPERIENCE,
    OTHER,
    UNKNOWN_NAME,
    RecognitionRules,
    extract_education,
    extract_email,
    extract_experience,
    extract_name,
    extract_phone,
    extract_skills,
    parse_resume_text,
    section_of,
)


@pytest.fixture
def rules():
    return RecognitionRules(
        known_employers=("Acme Labs", "Globex"),
        duration_years=("2024",),
    )


class TestContactFields:

    def test_email_returns_exact_substring(self):
        text = "Reach me at first.last+jobs@mail.example.org today"
        assert extract_email(text) == "first.last+jobs@mail.example.org"

    def test_email_takes_first_match(self):
        assert extract_email("a@b.io and c@d.io") == "a@b.io"

    def test_email_absent(self):
        assert extract_email("no contact details here @ all") is None

    @pytest.mark.parametrize("text,expected", [
        ("Call 555-123-4567 now", "555-123-4567"),
        ("Phone: (555) 123-4567", "(555) 123-4567"),
        ("Mobile +91 987-654-3210", "+91 987-654-3210"),
        ("5551234567", "5551234567"),
    ])
    def test_phone_shapes(self, text, expected):
        assert extract_phone(text) == expected

    def test_phone_absent(self):
        assert extract_phone("Call me maybe, ext 12") is None


class TestExtractName:

    def test_first_all_caps_multiword_line_is_title_cased(self):
        text = "RESUME\nJOHN SMITH\nEngineer"
        assert extract_name(text, RecognitionRules()) == "John Smith"

    def test_section_headers_are_not_names(self):
        text = "WORK EXPERIENCE\nTECHNICAL SKILLS\nMARY JONES"
        assert extract_name(text, RecognitionRules()) == "Mary Jones"

    def test_known_name_wins_even_when_not_caps(self):
        rules = RecognitionRules(known_names=("Alex Rivera Stone",))
        text = "Portfolio of alex rivera stone\nSOME OTHER NAME"
        assert extract_name(text, rules) == "Alex Rivera Stone"

    def test_no_candidate_returns_none(self):
        assert extract_name("lowercase only\nMixed Case Line", RecognitionRules()) is None


class TestSectionOf:

    @pytest.mark.parametrize("line,expected", [
        ("EDUCATION", EDUCATION),
        ("Education:", EDUCATION),
        ("Education Details", EDUCATION),
        ("Academic Education", EDUCATION),
        ("INTERNSHIP", EXPERIENCE),
        ("WORK EXPERIENCE", EXPERIENCE),
        ("Work Experience", EXPERIENCE),
        ("Internships:", EXPERIENCE),
        ("TECHNICAL SKILLS", OTHER),
        ("Skills", OTHER),
        ("CERTIFICATES", OTHER),
    ])
    def test_headers(self, line, expected):
        assert section_of(line, RecognitionRules()) == expected

    @pytest.mark.parametrize("line", [
        "",
        "JANE DOE",
        "SOFTWARE ENGINEERING INTERN",
        "Built skills in distributed systems and caching",
        "Soft skills matter",
    ])
    def test_body_lines(self, line):
        assert section_of(line, RecognitionRules()) is None


class TestExtractEducation:

    def test_sample_resume(self, sample_resume, rules):
        education = extract_education(sample_resume, rules)

        assert len(education) == 1
        entry = education[0]
        assert entry.degree == "B.TECH"
        assert entry.institution == "State University of Technology"
        assert entry.year == "2019"

    def test_other_degree_keywords_trigger_but_are_not_recorded(self, rules):
        text = "EDUCATION\nMaster of Science 2022\nTech University\nBachelor of Arts 2018\n"
        assert extract_education(text, rules) == []

    def test_b_e_is_normalized_to_b_tech(self, rules):
        text = "EDUCATION\nB.E. Mechanical Degree 2021\nGreenfield College of Engineering\n"
        entry = extract_education(text, rules)[0]
        assert entry.degree == "B.TECH"
        assert entry.institution == "Greenfield College of Engineering"
        assert entry.year == "2021"

    def test_institution_lookahead_is_two_lines(self, rules):
        text = "EDUCATION\nB.TECH 2020\nline one\nline two\nFar University\n"
        entry = extract_education(text, rules)[0]
        assert entry.institution == ""

    def test_section_closes_at_next_header(self, rules):
        text = (
            "EDUCATION\nB.TECH Computer Science 2020\n"
            "PROJECTS\nB.TECH capstone presented at City University 2021\n"
        )
        education = extract_education(text, rules)
        assert [entry.year for entry in education] == ["2020"]

    def test_mixed_case_header_opens_section(self, rules):
        text = "Education Details\nB.TECH Computer Science 2020\nCity University\n"
        education = extract_education(text, rules)

        assert [(entry.degree, entry.institution, entry.year) for entry in education] == [
            ("B.TECH", "City University", "2020"),
        ]

    def test_nothing_before_section(self, rules):
        assert extract_education("B.TECH 2020\nCity University\n", rules) == []

    def test_year_missing_is_empty(self, rules):
        entry = extract_education("EDUCATION\nB.TECH, CGPA 9.1\n", rules)[0]
        assert entry.year == ""


class TestExtractExperience:

    def test_sample_resume(self, sample_resume, rules):
        experience = extract_experience(sample_resume, rules)

        assert [entry.company for entry in experience] == ["Acme Labs", "Globex"]

        acme, globex = experience
        assert acme.position == "SOFTWARE ENGINEERING INTERN"
        assert acme.duration == "Jun 2024 - Aug 2024"
        assert acme.description == (
            "SOFTWARE ENGINEERING INTERN "
            "Built REST APIs for the billing service "
            "Wrote integration tests"
        )

        assert globex.position == "DATA INTERN"
        assert globex.duration == "Jan 2024 - Mar 2024"
        assert globex.description == (
            "DATA INTERN Jan 2024 - Mar 2024 Cleaned analytics datasets with pandas"
        )

    def test_short_lines_are_left_out_of_description(self, rules):
        text = "INTERNSHIP\nGlobex\nQA\nTested the payments API\n"
        entry = extract_experience(text, rules)[0]
        assert entry.position == ""
        assert entry.description == "Tested the payments API"

    def test_unknown_employers_are_ignored(self, rules):
        text = "INTERNSHIP\nInitech\nSOFTWARE INTERN\nFixed printers\n"
        assert extract_experience(text, rules) == []

    def test_employer_outside_section_is_ignored(self, rules):
        text = "SUMMARY\nFormerly at Acme Labs\nEDUCATION\nB.TECH 2020\n"
        assert extract_experience(text, rules) == []

    def test_no_duration_year_leaves_duration_empty(self):
        rules = RecognitionRules(known_employers=("Globex",), duration_years=("2031",))
        entry = extract_experience("INTERNSHIP\nGlobex\nJan 2024 - Mar 2024\n", rules)[0]
        assert entry.duration == ""


class TestExtractSkills:

    def test_case_insensitive(self):
        assert "java" in extract_skills("JAVA")
        assert "java" in extract_skills("Java")

    def test_synonyms_fold_into_standard_names(self):
        skills = extract_skills("Built services in NodeJS and NextJS")
        assert "node.js" in skills
        assert "next.js" in skills

    def test_idempotent_and_order_independent(self):
        text = "Docker, Kubernetes and Terraform on AWS"
        first = extract_skills(text)
        assert set(first) == set(extract_skills(text))
        assert set(first) == set(extract_skills("AWS on Terraform and Kubernetes, Docker"))

    def test_no_duplicates_and_lower_case(self, sample_resume):
        skills = extract_skills(sample_resume + sample_resume.upper())
        assert len(skills) == len(set(skills))
        assert all(skill == skill.lower() for skill in skills)


class TestParseResumeText:

    def test_contact_line_scenario(self):
        parsed = parse_resume_text(
            "Contact: jane@x.com, 555-123-4567. Skills: Java, SQL, HTML, CSS.",
            RecognitionRules(),
        )

        assert parsed.email == "jane@x.com"
        assert parsed.phone == "555-123-4567"
        assert {"java", "sql", "html", "css"} <= set(parsed.skills)

    def test_missing_fields_are_empty_not_absent(self):
        parsed = parse_resume_text("nothing useful here", RecognitionRules())

        assert parsed.name == UNKNOWN_NAME
        assert parsed.email == ""
        assert parsed.phone == ""
        assert parsed.education == []
        assert parsed.experience == []
        assert parsed.text == "nothing useful here"

    def test_sample_resume(self, sample_resume, rules):
        parsed = parse_resume_text(sample_resume, rules)

        assert isinstance(parsed, ParsedResume)
        assert parsed.name == "Jane Ann Doe"
        assert parsed.email == "jane.doe@example.com"
        assert parsed.phone == "+1 555-123-4567"
        assert len(parsed.education) == 1
        assert len(parsed.experience) == 2
        assert {"python", "java", "node.js", "react", "sql", "git", "docker"} <= set(parsed.skills)
