# services/report_assembler.py
from typing import Iterable, List, Optional, Tuple

from models.interview import (
    Interview, InterviewStatus, PrimaryBlocker, QuestionType, ReadinessBand,
    Report, ReportMetrics, Severity,
)
from utils.errors import SessionStateError
from utils.logger import get_logger

logger = get_logger("ReportAssembler")

# (lower bound, band), checked top-down
READINESS_THRESHOLDS = [
    (80, ReadinessBand.READY),
    (65, ReadinessBand.ALMOST_READY),
    (50, ReadinessBand.NEEDS_WORK),
]

TECHNICAL_TYPES = (QuestionType.TECHNICAL, QuestionType.CODING)


def readiness_band(overall_score: Optional[float]) -> Optional[ReadinessBand]:
    if overall_score is None:
        return None
    for lower, band in READINESS_THRESHOLDS:
        if overall_score >= lower:
            return band
    return ReadinessBand.NOT_READY


def _weighted_average(pairs: Iterable[Tuple[float, float]]) -> Optional[int]:
    """pairs of (score, weight); None when empty or weightless."""
    total = 0.0
    weights = 0.0
    for score, weight in pairs:
        total += score * weight
        weights += weight
    if weights <= 0:
        return None
    return round(total / weights)


def _severity(score: Optional[float]) -> Severity:
    if score is None or score < 50:
        return Severity.HIGH
    if score < 65:
        return Severity.MEDIUM
    return Severity.LOW


def _dedupe(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        key = item.strip()
        if key and key.lower() not in seen:
            seen.add(key.lower())
            out.append(key)
    return out


class ReportAssembler:
    """Reduces a completed interview's answers into its Report."""

    def assemble(self, interview: Interview) -> Report:
        if interview.status != InterviewStatus.COMPLETED:
            raise SessionStateError(
                f"Interview {interview.id} is {interview.status.value}; report requires completed"
            )

        answered_lengths = []
        skipped = 0
        for answer in interview.answers:
            if answer.skipped or not answer.transcript.strip():
                skipped += 1
            else:
                answered_lengths.append(len(answer.transcript.split()))
        answered = len(answered_lengths)
        total = len(interview.questions)
        metrics = ReportMetrics(
            average_answer_length=(
                round(sum(answered_lengths) / len(answered_lengths)) if answered_lengths else 0
            ),
            questions_answered=answered,
            questions_skipped=skipped,
            total_questions=total,
        )

        scored = []  # (question, answer, score)
        for question in interview.questions:
            answer = interview.answer_for(question.id)
            if not answer or answer.ai_evaluation is None:
                continue
            score = answer.ai_evaluation.overall()
            if score is not None:
                scored.append((question, answer, score))

        overall = _weighted_average((s, q.weight) for q, _, s in scored)
        technical = _weighted_average((s, q.weight) for q, _, s in scored if q.type in TECHNICAL_TYPES)
        behavioral = _weighted_average(
            (s, q.weight) for q, _, s in scored if q.type == QuestionType.BEHAVIORAL
        )

        blockers = []
        strengths = []
        improvements = []
        recommendations = []
        feedback = []
        confidences = []
        for question in interview.questions:
            answer = interview.answer_for(question.id)
            evaluation = answer.ai_evaluation if answer else None
            if evaluation is None:
                continue
            score = evaluation.overall()
            for issue in evaluation.detected_issues:
                blockers.append(PrimaryBlocker(
                    question_id=question.id,
                    question_text=question.text,
                    question_type=question.type,
                    issue=issue,
                    severity=_severity(score),
                    impact=evaluation.feedback,
                ))
                improvements.append(issue)
            strengths.extend(evaluation.strengths)
            recommendations.extend(evaluation.recommendations)
            if evaluation.feedback:
                feedback.append(evaluation.feedback)
            if evaluation.confidence is not None:
                confidences.append(evaluation.confidence)

        severity_rank = {Severity.HIGH: 0, Severity.MEDIUM: 1, Severity.LOW: 2}
        blockers.sort(key=lambda b: severity_rank[b.severity])

        report = Report(
            overall_score=overall,
            technical_score=technical,
            behavioral_score=behavioral,
            readiness_band=readiness_band(overall),
            primary_blockers=blockers,
            strengths=_dedupe(strengths),
            areas_for_improvement=_dedupe(improvements),
            recommendations=_dedupe(recommendations),
            metrics=metrics,
            summary=" ".join(_dedupe(feedback)) or None,
            ai_confidence=round(sum(confidences) / len(confidences), 2) if confidences else None,
        )
        logger.info(
            f"📊 Report for {interview.id}: overall={overall} band="
            f"{report.readiness_band.value if report.readiness_band else None} "
            f"answered={answered}/{total}"
        )
        return report
