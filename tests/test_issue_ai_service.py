import pytest

from app.models.issue import IssueCategory, Severity
from app.services.issue_ai_service import IssueAIService

QUIET_TITLE = "Streetlight out"
QUIET_DESCRIPTION = "The lamp near the school gate stays off at night."


@pytest.fixture
def analyzer() -> IssueAIService:
    return IssueAIService()


def test_critical_tier_beats_earlier_medium_keyword(analyzer):
    severity = analyzer.determine_severity(
        "Routine maintenance overdue", "Smoke and fire seen near the transformer", IssueCategory.OTHER
    )
    assert severity == Severity.CRITICAL


def test_keywords_match_as_substrings(analyzer):
    severity = analyzer.determine_severity("Old fireplace chimney", "", IssueCategory.OTHER)
    assert severity == Severity.CRITICAL


def test_keyword_match_ignores_case(analyzer):
    assert analyzer.determine_severity("BLOCKED drain", "", IssueCategory.SEWAGE) == Severity.HIGH


def test_medium_keywords(analyzer):
    assert analyzer.determine_severity("Dirty footpath", "", IssueCategory.ROADS) == Severity.MEDIUM


@pytest.mark.parametrize("category", [IssueCategory.ELECTRICITY, IssueCategory.SAFETY, IssueCategory.TRAFFIC])
def test_high_default_categories(analyzer, category):
    assert analyzer.determine_severity(QUIET_TITLE, QUIET_DESCRIPTION, category) == Severity.HIGH


@pytest.mark.parametrize("category", [IssueCategory.ROADS, IssueCategory.WATER, IssueCategory.OTHER])
def test_low_default_categories(analyzer, category):
    assert analyzer.determine_severity(QUIET_TITLE, QUIET_DESCRIPTION, category) == Severity.LOW


@pytest.mark.parametrize("description_length,image_count,expected", [
    (20, 0, 70),
    (20, 1, 90),
    (101, 0, 80),
    (100, 0, 70),
    (150, 3, 100),
])
def test_confidence(analyzer, description_length, image_count, expected):
    assert analyzer.calculate_confidence("x" * description_length, image_count) == expected


def test_pothole_report(analyzer):
    analysis = analyzer.generate_analysis("issue-1", "Pothole", "x" * 150, IssueCategory.ROADS, 2)

    assert analysis.issue_id == "issue-1"
    assert analysis.severity == Severity.LOW
    assert analysis.confidence == 100
    assert analysis.assigned_department == "Public Works Department"
    assert analysis.estimated_resolution_days == 7
    assert analysis.detected_issues == ["Road deterioration", "Safety hazard"]
    assert analysis.risk_factors == ["Traffic congestion", "Vehicle damage risk"]


def test_critical_report_resolves_two_days_sooner(analyzer):
    analysis = analyzer.generate_analysis(
        "issue-2", "Pothole", "A motorbike accident happened here yesterday", IssueCategory.ROADS, 2
    )
    assert analysis.severity == Severity.CRITICAL
    assert analysis.estimated_resolution_days == 5


def test_resolution_days_never_below_two(analyzer):
    analysis = analyzer.generate_analysis("issue-3", "Gas leak", "", IssueCategory.SAFETY, 1)
    assert analysis.estimated_resolution_days == 2


def test_short_template_lists_are_kept_whole(analyzer):
    analysis = analyzer.generate_analysis("issue-4", QUIET_TITLE, QUIET_DESCRIPTION, IssueCategory.OTHER, 1)
    assert analysis.risk_factors == ["Potential public concern"]
    assert analysis.assigned_department == "Municipal Administration"


def test_recommendations_for_critical_garbage_without_photos(analyzer):
    assert analyzer.generate_recommendations(IssueCategory.GARBAGE, Severity.CRITICAL, 0) == [
        "URGENT: Dispatch team immediately for on-site assessment",
        "Alert relevant authority for emergency action",
        "Request additional photos from reporter for better analysis",
        "Schedule immediate waste collection",
        "Identify root cause of delay",
    ]


def test_single_image_adds_no_evidence_note(analyzer):
    assert analyzer.generate_recommendations(IssueCategory.SEWAGE, Severity.LOW, 1) == [
        "Schedule inspection within 3-5 business days"
    ]


def test_recommendations_for_high_electricity_with_photos(analyzer):
    assert analyzer.generate_recommendations(IssueCategory.ELECTRICITY, Severity.HIGH, 2) == [
        "Schedule urgent inspection within 24 hours",
        "Notify department to prioritize this issue",
        "Sufficient visual evidence for assessment",
        "Safety protocol: Restrict public access to area",
        "Engage qualified electrician for inspection",
    ]


def test_every_category_has_a_department(analyzer):
    for category in IssueCategory:
        assert analyzer.get_department(category)


def test_priority_score(analyzer):
    critical = analyzer.generate_analysis("a", "Fire", "", IssueCategory.OTHER, 1)
    low = analyzer.generate_analysis("b", QUIET_TITLE, "x" * 150, IssueCategory.ROADS, 1)
    assert analyzer.get_priority_score(critical) == 100 + 90 * 0.2
    assert analyzer.get_priority_score(low) == 25 + 100 * 0.2
