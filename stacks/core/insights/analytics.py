"""
Advanced analytics.

Pure score calculations over a user's session history. Every function
takes the reference time explicitly; nothing here reads the clock,
the database or the network.

Rounding is half-up, so 2.5 scores as 3.

Dependencies: stacks.core.insights
System role: Wellbeing metrics for the analytics endpoint
"""

import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Protocol, Sequence

from stacks.core.insights.analytics_schema import (
    AdvancedAnalytics,
    AnalyticsSummary,
    EmotionalBalance,
    EmotionalRegulationMetrics,
    GrowthTrajectory,
    Milestone,
    ResilienceMetrics,
    SelfAwarenessBreakdown,
    SelfAwarenessScore,
    WeeklyProgress,
)
from stacks.core.insights.insights_schema import CognitiveInsights

DAY = timedelta(days=1)
STACK_TYPE_COUNT = 4
REGULATION_WINDOW = timedelta(days=90)
CONSISTENCY_WINDOW = timedelta(days=30)
STREAK_GAP_DAYS = 7
WEEKS_TRACKED = 12


class SessionSnapshot(Protocol):
    stack_type: object
    status: object
    created_at: datetime


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _tag(value: object) -> str:
    return str(getattr(value, "value", value))


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _chronological(sessions: Sequence[SessionSnapshot]) -> list[SessionSnapshot]:
    return sorted((s for s in sessions if s.created_at is not None), key=lambda s: _utc(s.created_at))


def _days_between(earlier: SessionSnapshot, later: SessionSnapshot) -> float:
    return (_utc(later.created_at) - _utc(earlier.created_at)) / DAY


def _days_after_angry(sessions: Sequence[SessionSnapshot]) -> list[float]:
    """Gap in days from each angry Stack to the Stack that follows it."""
    return [
        _days_between(current, following)
        for current, following in zip(sessions, sessions[1:])
        if _tag(current.stack_type) == "angry"
    ]


def _completed(sessions: Sequence[SessionSnapshot]) -> list[SessionSnapshot]:
    return [s for s in sessions if _tag(s.status) == "completed"]


def _count_type(sessions: Sequence[SessionSnapshot], stack_type: str) -> int:
    return sum(1 for s in sessions if _tag(s.stack_type) == stack_type)


def _belief_count(insights: CognitiveInsights | None, kind: str) -> int:
    if insights is None:
        return 0
    return sum(1 for b in insights.belief_patterns if b.type == kind)


def emotional_regulation(
    sessions: Sequence[SessionSnapshot],
    now: datetime,
) -> EmotionalRegulationMetrics:
    """Balance of positive and negative Stacks over the last 90 days and how anger is processed."""
    recent = [s for s in _chronological(sessions) if _utc(s.created_at) >= now - REGULATION_WINDOW]
    if not recent:
        return EmotionalRegulationMetrics(
            current_score=50,
            trend="stable",
            average_response_time=0,
            emotional_balance=EmotionalBalance(),
            regulation_strategies=["Complete more Stacks to track emotional regulation"],
        )

    total = len(recent)
    angry = _count_type(recent, "angry")
    gratitude = _count_type(recent, "gratitude")
    idea = _count_type(recent, "idea")
    discover = _count_type(recent, "discover")

    balance = EmotionalBalance(
        positive=round_half_up((gratitude + idea) / total * 100),
        negative=round_half_up(angry / total * 100),
        neutral=round_half_up(discover / total * 100),
    )

    gaps = _days_after_angry(recent)
    average_response_time = round_half_up(sum(gaps) / len(gaps)) if gaps else 0

    completion_rate = len(_completed(recent)) / total
    balance_score = 100 - abs(50 - balance.positive)
    response_score = max(0, 100 - average_response_time * 5) if average_response_time > 0 else 80
    current_score = round_half_up(completion_rate * 30 + balance_score * 0.4 + response_score * 0.3)

    midpoint = total // 2
    first_half_angry = _count_type(recent[:midpoint], "angry")
    second_half_angry = _count_type(recent[midpoint:], "angry")
    if second_half_angry < first_half_angry * 0.7:
        trend = "improving"
    elif second_half_angry > first_half_angry * 1.3:
        trend = "declining"
    else:
        trend = "stable"

    return EmotionalRegulationMetrics(
        current_score=current_score,
        trend=trend,
        average_response_time=average_response_time,
        emotional_balance=balance,
        regulation_strategies=[
            "Processing anger through structured reflection" if angry > 0 else "Maintaining emotional balance",
            "Building positive patterns through gratitude" if gratitude > 2 else "Consider more gratitude practices",
            "Consistent completion of reflections" if completion_rate > 0.8 else "Focus on completing started Stacks",
        ],
    )


def self_awareness(
    sessions: Sequence[SessionSnapshot],
    reflection_lengths: Sequence[int],
    insights: CognitiveInsights | None,
    now: datetime,
) -> SelfAwarenessScore:
    """
    Depth, pattern recognition, insight quality and consistency of reflection.

    Args:
        sessions: All of the user's sessions
        reflection_lengths: Character counts of sampled user reflections
        insights: Three-month insights report (None when unavailable)
        now: Reference time
    """
    if not sessions:
        return SelfAwarenessScore(
            overall_score=0,
            reflection_depth=0,
            pattern_recognition=0,
            insight_quality=0,
            consistency_score=0,
            breakdown=SelfAwarenessBreakdown(),
        )

    average_length = sum(reflection_lengths) / (len(reflection_lengths) or 1)
    reflection_depth = min(100, round_half_up(average_length / 200 * 100))

    themes = len(insights.themes) if insights else 0
    beliefs = len(insights.belief_patterns) if insights else 0
    pattern_recognition = min(100, themes * 15 + beliefs * 20)

    insight_quality = round_half_up(_belief_count(insights, "empowering") / (beliefs or 1) * 100)

    recent = [s for s in sessions if s.created_at is not None and _utc(s.created_at) >= now - CONSISTENCY_WINDOW]
    consistency_score = min(100, len(recent) * 20)

    overall_score = round_half_up(
        reflection_depth * 0.25
        + pattern_recognition * 0.30
        + insight_quality * 0.25
        + consistency_score * 0.20
    )

    return SelfAwarenessScore(
        overall_score=overall_score,
        reflection_depth=reflection_depth,
        pattern_recognition=pattern_recognition,
        insight_quality=insight_quality,
        consistency_score=consistency_score,
        breakdown=SelfAwarenessBreakdown(
            cognitive_clarity=round_half_up((reflection_depth + insight_quality) / 2),
            emotional_intelligence=round_half_up((insight_quality + pattern_recognition) / 2),
            behavioral_awareness=round_half_up((consistency_score + reflection_depth) / 2),
        ),
    )


def resilience(sessions: Sequence[SessionSnapshot], now: datetime) -> ResilienceMetrics:
    """Completion, streaks of Stacks at most 7 days apart, and recovery after anger."""
    ordered = _chronological(sessions)
    if not ordered:
        return ResilienceMetrics(
            resilience_score=0,
            completion_rate=0,
            consistency_streak=0,
            longest_streak=0,
            recovery_time=0,
            challenge_processing_rate=0,
            adaptability_score=0,
        )

    completion_rate = round_half_up(len(_completed(ordered)) / len(ordered) * 100)

    longest_streak = 1
    streak = 1
    for previous, current in zip(ordered, ordered[1:]):
        if _days_between(previous, current) <= STREAK_GAP_DAYS:
            streak += 1
            longest_streak = max(longest_streak, streak)
        else:
            streak = 1

    days_since_last = (now - _utc(ordered[-1].created_at)) / DAY
    current_streak = streak if days_since_last <= STREAK_GAP_DAYS else 0

    gaps = _days_after_angry(ordered)
    recovery_time = round_half_up(sum(gaps) / len(gaps)) if gaps else 0

    angry = [s for s in ordered if _tag(s.stack_type) == "angry"]
    challenge_processing_rate = (
        round_half_up(len(_completed(angry)) / len(angry) * 100) if angry else 100
    )

    unique_types = len({_tag(s.stack_type) for s in ordered})
    adaptability_score = round_half_up(unique_types / STACK_TYPE_COUNT * 100)

    resilience_score = round_half_up(
        completion_rate * 0.30
        + min(longest_streak * 10, 100) * 0.20
        + (100 - min(recovery_time * 10, 100)) * 0.20
        + challenge_processing_rate * 0.15
        + adaptability_score * 0.15
    )

    return ResilienceMetrics(
        resilience_score=resilience_score,
        completion_rate=completion_rate,
        consistency_streak=current_streak,
        longest_streak=longest_streak,
        recovery_time=recovery_time,
        challenge_processing_rate=challenge_processing_rate,
        adaptability_score=adaptability_score,
    )


def weekly_progress(sessions: Sequence[SessionSnapshot], now: datetime) -> list[WeeklyProgress]:
    """
    Completed Stacks per week for the last 12 weeks, oldest first.

    Week i (0 = current) covers [now - (i + 1) weeks, now - i weeks).
    """
    weeks = []
    for i in range(WEEKS_TRACKED):
        week_end = now - timedelta(weeks=i)
        week_start = week_end - timedelta(weeks=1)
        completed = sum(
            1
            for s in _completed(sessions)
            if s.created_at is not None and week_start <= _utc(s.created_at) < week_end
        )
        weeks.append(
            WeeklyProgress(
                week=week_start.date().isoformat(),
                score=min(100, completed * 25),
                stacks_completed=completed,
            )
        )
    weeks.reverse()
    return weeks


def growth_trajectory(
    sessions: Sequence[SessionSnapshot],
    insights: CognitiveInsights | None,
    now: datetime,
) -> GrowthTrajectory:
    """
    Weekly progress, trajectory direction, milestones and focus areas.

    Args:
        sessions: All of the user's sessions
        insights: Six-month insights report (None when unavailable)
        now: Reference time
    """
    ordered = _chronological(sessions)
    if not ordered:
        return GrowthTrajectory(
            overall_growth=0,
            trajectory_direction="plateauing",
            milestones=[],
            strength_areas=["Begin your growth journey by completing your first Stack"],
            growth_areas=["Self-reflection", "Pattern recognition", "Emotional awareness"],
            predicted_next_breakthrough="Complete your first Stack to begin tracking growth",
            weekly_progress=[],
        )

    weeks = weekly_progress(ordered, now)
    recent_weeks = weeks[-4:]
    older_weeks = weeks[:4]
    recent_avg = sum(w.score for w in recent_weeks) / len(recent_weeks)
    older_avg = sum(w.score for w in older_weeks) / (len(older_weeks) or 1)

    if recent_avg > older_avg * 1.2:
        direction = "accelerating"
    elif recent_avg < older_avg * 0.8:
        direction = "declining"
    elif abs(recent_avg - older_avg) < 10:
        direction = "plateauing"
    else:
        direction = "steady"

    milestones = [
        Milestone(
            date=_utc(ordered[0].created_at).date().isoformat(),
            achievement="Completed first Stack session",
            impact="major",
        )
    ]
    if len(ordered) >= 10:
        milestones.append(
            Milestone(
                date=_utc(ordered[9].created_at).date().isoformat(),
                achievement="Reached 10 Stack sessions",
                impact="major",
            )
        )

    empowering = _belief_count(insights, "empowering")
    if empowering >= 3:
        milestones.append(
            Milestone(
                date=now.date().isoformat(),
                achievement=f"Developed {empowering} empowering belief patterns",
                impact="moderate",
            )
        )

    strength_areas = []
    growth_areas = []

    most_used = Counter(_tag(s.stack_type) for s in ordered).most_common(1)
    if most_used:
        strength_areas.append(f"Strong engagement with {most_used[0][0]} Stacks")
    if empowering > 0:
        strength_areas.append("Building empowering beliefs")
    if _belief_count(insights, "limiting") > 2:
        growth_areas.append("Transform limiting beliefs")
    if sum(1 for s in ordered if _tag(s.status) == "in_progress") > 2:
        growth_areas.append("Complete in-progress Stacks")

    overall_growth = round_half_up(len(ordered) * 5 + empowering * 15 + recent_avg * 0.3)

    return GrowthTrajectory(
        overall_growth=min(100, overall_growth),
        trajectory_direction=direction,
        milestones=milestones[:5],
        strength_areas=strength_areas or ["Building self-awareness"],
        growth_areas=growth_areas or ["Increase Stack completion rate"],
        predicted_next_breakthrough=(
            "Major belief transformation imminent"
            if recent_avg > 50
            else "Continue consistent practice for breakthrough"
        ),
        weekly_progress=weeks,
    )


def advanced_analytics(
    regulation: EmotionalRegulationMetrics,
    awareness: SelfAwarenessScore,
    resilience_metrics: ResilienceMetrics,
    trajectory: GrowthTrajectory,
) -> AdvancedAnalytics:
    """Combine the four metric groups with an overall wellbeing summary."""
    overall = round_half_up(
        regulation.current_score * 0.30
        + awareness.overall_score * 0.25
        + resilience_metrics.resilience_score * 0.25
        + trajectory.overall_growth * 0.20
    )

    if regulation.trend == "improving":
        key_insight = "Your emotional regulation is improving significantly"
    elif awareness.overall_score > 70:
        key_insight = "You demonstrate high self-awareness and insight"
    elif resilience_metrics.resilience_score > 70:
        key_insight = "Your resilience and consistency are exceptional"
    else:
        key_insight = "Continue building your foundation through consistent practice"

    scores = [
        ("Emotional Regulation", regulation.current_score),
        ("Self-Awareness", awareness.overall_score),
        ("Resilience", resilience_metrics.resilience_score),
    ]
    lowest_area = min(scores, key=lambda item: item[1])[0]

    return AdvancedAnalytics(
        emotional_regulation=regulation,
        self_awareness=awareness,
        resilience=resilience_metrics,
        growth_trajectory=trajectory,
        summary=AnalyticsSummary(
            overall_wellbeing_score=overall,
            key_insight=key_insight,
            recommended_focus=f"Focus on {lowest_area}",
        ),
    )
