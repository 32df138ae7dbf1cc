"""
Insights and analytics over a user's reflections.

Exports:
  - CognitiveInsightsAnalyzer: Language-model insight reports
  - analytics: Pure wellbeing score calculations
"""

from stacks.core.insights.cognitive_insights import CognitiveInsightsAnalyzer

__all__ = ["CognitiveInsightsAnalyzer"]
