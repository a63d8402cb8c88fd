"""
Issue AI Analysis Service
Keyword-based severity tiers plus category templates (no model inference)
"""
import uuid
from datetime import datetime
from typing import Dict, List

from app.models.issue import AIAnalysis, IssueCategory, Severity


class IssueAIService:
    """Heuristic analyzer run once, synchronously, when an issue is reported"""

    # Category -> owning department
    DEPARTMENT_MAPPING: Dict[IssueCategory, str] = {
        IssueCategory.ROADS: "Public Works Department",
        IssueCategory.WATER: "Water Supply Department",
        IssueCategory.ELECTRICITY: "Electricity Department",
        IssueCategory.GARBAGE: "Waste Management Department",
        IssueCategory.SEWAGE: "Sewage & Drainage Department",
        IssueCategory.POLLUTION: "Environmental Department",
        IssueCategory.SAFETY: "Police & Safety Department",
        IssueCategory.TRAFFIC: "Traffic Police Department",
        IssueCategory.OTHER: "Municipal Administration"
    }

    CATEGORY_TEMPLATES: Dict[IssueCategory, Dict] = {
        IssueCategory.ROADS: {
            "detected_issues": ["Road deterioration", "Safety hazard", "Pothole damage", "Pavement damage"],
            "risk_factors": ["Traffic congestion", "Vehicle damage risk", "Accident hazard"],
            "estimated_days": 7
        },
        IssueCategory.WATER: {
            "detected_issues": ["Water quality issue", "Supply disruption", "Water logging", "Drainage blockage"],
            "risk_factors": ["Health hazard", "Property damage", "Disease spread risk"],
            "estimated_days": 5
        },
        IssueCategory.ELECTRICITY: {
            "detected_issues": ["Power outage", "Damaged infrastructure", "Safety hazard"],
            "risk_factors": ["Safety risk", "Fire hazard", "Equipment damage"],
            "estimated_days": 3
        },
        IssueCategory.GARBAGE: {
            "detected_issues": ["Waste accumulation", "Sanitation issue", "Health hazard"],
            "risk_factors": ["Disease spread", "Environmental pollution", "Pest infestation"],
            "estimated_days": 4
        },
        IssueCategory.SEWAGE: {
            "detected_issues": ["Sewage blockage", "Overflow", "Drainage issue", "Pipe damage"],
            "risk_factors": ["Health hazard", "Environmental pollution", "Disease outbreak risk"],
            "estimated_days": 6
        },
        IssueCategory.POLLUTION: {
            "detected_issues": ["Air pollution", "Water pollution", "Noise pollution"],
            "risk_factors": ["Public health risk", "Environmental damage", "Long-term health effects"],
            "estimated_days": 14
        },
        IssueCategory.SAFETY: {
            "detected_issues": ["Security concern", "Public safety issue", "Crime risk"],
            "risk_factors": ["Public harm risk", "Criminal activity", "Community threat"],
            "estimated_days": 2
        },
        IssueCategory.TRAFFIC: {
            "detected_issues": ["Traffic congestion", "Signal malfunction", "Road obstruction"],
            "risk_factors": ["Accident risk", "Commute delay", "Emergency vehicle delay"],
            "estimated_days": 3
        },
        IssueCategory.OTHER: {
            "detected_issues": ["General issue", "Civic infrastructure problem"],
            "risk_factors": ["Potential public concern"],
            "estimated_days": 10
        }
    }

    # Checked in this order; the first tier with any substring hit wins
    SEVERITY_KEYWORDS = {
        Severity.CRITICAL: [
            "emergency", "danger", "critical", "severe", "collapse",
            "gas leak", "fire", "injury", "death", "accident"
        ],
        Severity.HIGH: [
            "urgent", "serious", "major", "blocked", "damaged",
            "hazard", "unsafe", "broken", "flooding"
        ],
        Severity.MEDIUM: [
            "needs repair", "maintenance", "issue", "problem",
            "concern", "dirty", "poor"
        ]
    }

    # Categories that default to "high" when no keyword matches
    HIGH_DEFAULT_CATEGORIES = (IssueCategory.ELECTRICITY, IssueCategory.SAFETY, IssueCategory.TRAFFIC)

    CATEGORY_RECOMMENDATIONS: Dict[IssueCategory, List[str]] = {
        IssueCategory.ROADS: [
            "Conduct structural assessment before repair work",
            "Install temporary warning signs if needed"
        ],
        IssueCategory.ELECTRICITY: [
            "Safety protocol: Restrict public access to area",
            "Engage qualified electrician for inspection"
        ],
        IssueCategory.WATER: [
            "Test water quality if applicable",
            "Assess drainage capacity"
        ],
        IssueCategory.GARBAGE: [
            "Schedule immediate waste collection",
            "Identify root cause of delay"
        ],
        IssueCategory.SAFETY: [
            "Increase police patrolling in the area",
            "Coordinate with local safety officials"
        ]
    }

    SEVERITY_WEIGHTS = {
        Severity.CRITICAL: 100,
        Severity.HIGH: 75,
        Severity.MEDIUM: 50,
        Severity.LOW: 25
    }

    BASE_CONFIDENCE = 70
    MIN_RESOLUTION_DAYS = 2

    def determine_severity(self, title: str, description: str, category: IssueCategory) -> Severity:
        """
        Classify severity by keyword containment over title + description

        Tier priority is critical -> high -> medium regardless of where the
        keywords appear in the text. Matching is plain substring containment.
        """
        text = f"{title} {description}".lower()

        for severity, keywords in self.SEVERITY_KEYWORDS.items():
            if any(keyword in text for keyword in keywords):
                return severity

        if IssueCategory(category) in self.HIGH_DEFAULT_CATEGORIES:
            return Severity.HIGH
        return Severity.LOW

    def calculate_confidence(self, description: str, image_count: int) -> int:
        confidence = self.BASE_CONFIDENCE
        if image_count > 0:
            confidence += 20
        if len(description) > 100:
            confidence += 10
        return min(100, confidence)

    def get_department(self, category: IssueCategory) -> str:
        return self.DEPARTMENT_MAPPING[IssueCategory(category)]

    def generate_recommendations(
        self,
        category: IssueCategory,
        severity: Severity,
        image_count: int
    ) -> List[str]:
        """Severity opener, then an evidence note, then category advice"""
        recommendations = []

        if severity == Severity.CRITICAL:
            recommendations.append("URGENT: Dispatch team immediately for on-site assessment")
            recommendations.append("Alert relevant authority for emergency action")
        elif severity == Severity.HIGH:
            recommendations.append("Schedule urgent inspection within 24 hours")
            recommendations.append("Notify department to prioritize this issue")
        else:
            recommendations.append("Schedule inspection within 3-5 business days")

        # A single image adds nothing
        if image_count == 0:
            recommendations.append("Request additional photos from reporter for better analysis")
        elif image_count >= 2:
            recommendations.append("Sufficient visual evidence for assessment")

        recommendations.extend(self.CATEGORY_RECOMMENDATIONS.get(IssueCategory(category), []))
        return recommendations

    def generate_analysis(
        self,
        issue_id: str,
        title: str,
        description: str,
        category: IssueCategory,
        image_count: int
    ) -> AIAnalysis:
        """
        Build the analysis record for a new issue

        Args:
            issue_id: Id of the issue being reported
            title: Issue title
            description: Free-text description
            category: Reported category
            image_count: Number of images attached by the reporter

        Returns:
            AIAnalysis with severity, confidence, department and advice
        """
        category = IssueCategory(category)
        severity = self.determine_severity(title, description, category)
        template = self.CATEGORY_TEMPLATES[category]

        estimated_days = template["estimated_days"]
        if severity == Severity.CRITICAL:
            estimated_days -= 2

        return AIAnalysis(
            id=f"analysis-{uuid.uuid4().hex[:12]}",
            issue_id=issue_id,
            severity=severity,
            confidence=self.calculate_confidence(description, image_count),
            detected_issues=template["detected_issues"][:2],
            recommendations=self.generate_recommendations(category, severity, image_count),
            assigned_department=self.get_department(category),
            estimated_resolution_days=max(self.MIN_RESOLUTION_DAYS, estimated_days),
            risk_factors=template["risk_factors"][:2],
            analyzed_at=datetime.utcnow()
        )

    def get_priority_score(self, analysis: AIAnalysis) -> float:
        """Severity weight plus up to 20 points of confidence bonus"""
        return self.SEVERITY_WEIGHTS[analysis.severity] + analysis.confidence * 0.2


# Singleton instance
issue_ai_service = IssueAIService()
