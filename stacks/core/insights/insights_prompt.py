"""
Insight prompts.

Prompt templates for the cognitive insight reports. Reflections are
passed in as a pre-formatted block; the response format is enforced by
structured output, so the prompts only describe what to look for.

Dependencies: langchain_core.prompts
System role: Prompt templates for insight generation
"""

from langchain_core.prompts import ChatPromptTemplate

COGNITIVE_INSIGHTS_PROMPT = ChatPromptTemplate.from_messages([
    ("human", """You are an expert cognitive behavioral therapist analyzing a client's Stack sessions to identify patterns and provide insights.

Here are the client's reflections from their Stack sessions:

{reflections}

Analyze these reflections and provide a comprehensive cognitive insights report: recurring themes (with frequency, the stack types they appear in, emotional tone and a 2-3 sentence interpretation), belief patterns (limiting, empowering or neutral, with how they evolved and recommendations), emotional triggers (with contexts, frequency and a healthier suggested response), an overall growth narrative of 2-3 paragraphs, and at least three actionable recommendations.

Focus on:
- Recurring themes across different Stack types
- Limiting vs empowering beliefs
- Emotional patterns and triggers
- Growth trajectory and positive changes
- Specific, actionable next steps"""),
])

THEME_ANALYSIS_PROMPT = ChatPromptTemplate.from_messages([
    ("human", """Analyze the following reflections related to the theme "{theme}":

{reflections}

Provide a detailed analysis. Use "{theme}" as the theme and {frequency} as the frequency. List the stack types where this theme appears, the emotional tone, and a 2-3 sentence deep interpretation of what this theme reveals about the person's inner world."""),
])

BELIEF_PATTERNS_PROMPT = ChatPromptTemplate.from_messages([
    ("human", """As a cognitive behavioral therapist, identify belief patterns from these reflections:

{reflections}

Identify recurring belief patterns and classify each as limiting, empowering or neutral, with occurrences, how it evolved over time, and specific cognitive restructuring techniques.

Focus on:
- Core beliefs about self, others, and the world
- Limiting beliefs that hold them back
- Empowering beliefs that drive growth
- How beliefs have evolved over time"""),
])

EMOTIONAL_TRIGGERS_PROMPT = ChatPromptTemplate.from_messages([
    ("human", """As an emotion-focused therapist, identify emotional triggers and patterns:

{reflections}

Identify recurring emotional triggers with the emotion triggered, the contexts, an estimated frequency, and a healthier emotional regulation strategy.

Focus on:
- What consistently triggers certain emotions
- Patterns in emotional reactivity
- Healthier ways to respond to triggers
- Emotional regulation strategies"""),
])

RECOMMENDATIONS_PROMPT = ChatPromptTemplate.from_messages([
    ("human", """You are an expert cognitive behavioral therapist and NLP practitioner planning a client's next steps.

Stack history:
- Total Stacks: {total_stacks}
- Completed: {completed_stacks}
- In progress: {in_progress_stacks}
- Stacks by type: {type_counts}

Insights from their recent reflections:

Growth narrative: {narrative}

Themes: {themes}

Belief patterns: {beliefs}

Emotional triggers: {triggers}

Produce personalized recommendations: transformation opportunities (current pattern, desired pattern, specific actions, difficulty easy/moderate/challenging, expected impact low/medium/high, related themes), priority actions with rationale, timeframe and resources, growth metrics (belief shift potential and emotional regulation improvement as 0-100 scores, plus an overall growth trajectory of accelerating, steady or emerging), and the single best next Stack (gratitude, idea, discover or angry) with its focus and the reason."""),
])
