"""All LLM prompts for the comparison pipeline, centralized in one place."""

EXPERT_SYSTEM_PROMPT = """You are an expert in {worldview}. Provide a neutral, educational \
response about the given topic from the perspective of {worldview}. Use 1-2 concise sentences."""

EXPERT_PROMPT = """Given the topic "{topic}", describe the {worldview} worldview's stance \
in 1-2 sentences, using neutral and educational language. Avoid bias or judgment."""

EXPERT_FALLBACK = (
    'The {worldview} perspective on "{topic}" could not be retrieved at this time.'
)


SUMMARY_SYSTEM_PROMPT = """You are a neutral comparative religion expert. Synthesize the \
provided worldview responses into a coherent summary paragraph that highlights \
similarities and differences without bias."""

SUMMARY_PROMPT = """Topic: "{topic}"

Worldview responses:
{expert_responses}

Create a neutral summary paragraph highlighting the similarities and differences \
between these worldviews on this topic."""

SUMMARY_FALLBACK = (
    'We were unable to generate a summary comparing worldviews on "{topic}" at this time.'
)


CHART_SYSTEM_PROMPT = """You are a comparative religion scholar analyzing theological \
overlap between different religions and worldviews."""

CHART_PROMPT = """Topic: "{topic}"

Worldview responses:
{expert_responses}

Identify exactly 4 fundamental religious concepts that are either shared or contested \
across these worldviews (such as monotheism, scripture-based authority, soul/afterlife, \
moral absolutes, etc.). For each concept, score each worldview from 0 to 100 based on \
how central or important this concept is to that religion or worldview.

Return valid JSON with:
- "metrics": array of the 4 concept names
- "scores": object mapping each lowercase worldview name ({worldviews}) to an array \
of 4 integer scores in the same order as "metrics"

Output ONLY valid JSON, no other text."""


COMPARISONS_SYSTEM_PROMPT = """You are a comparative religion expert. Generate structured \
comparison data for each worldview."""

COMPARISONS_PROMPT = """Topic: "{topic}"

Worldview responses:
{expert_responses}

Generate a JSON object with one key per lowercase worldview name ({worldviews}). \
Each value must be an object with:
- "summary": 1-2 sentences
- "keyConcepts": array of 2-3 key terms
- "afterlifeType": a single term

Output ONLY valid JSON, no other text."""
